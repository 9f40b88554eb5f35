from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.adapters.clock import FrozenClock
from src.adapters.memory_api import InMemoryContentApi
from src.api.main import create_app
from src.app_shell.config import Settings
from src.app_shell.context import SiteContext
from src.app_shell.sessions import VisitorSession
from src.domain.entities import (
    CategoryData,
    ContentKind,
    FacilityItem,
    JournalItem,
    LevelConfig,
    LevelId,
    NewsItem,
    ProjectItem,
    Stat,
)
from src.rules.loader import load_rules
from src.rules.models import Rules

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def rules() -> Rules:
    """The project's real rules.yaml."""
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def content_api() -> InMemoryContentApi:
    """Content API seeded with a small multi-level data set."""
    news = [
        NewsItem(
            id=str(i),
            title=f"Kegiatan Santri {i}",
            excerpt="Ringkasan",
            content="Isi berita",
            jenjang=LevelId.MI if i % 2 else LevelId.SMP,
            category="Kegiatan",
        )
        for i in range(1, 9)
    ]
    news.append(
        NewsItem(
            id="9",
            title="Juara Olimpiade Sains",
            jenjang=LevelId.SMA,
            category="Prestasi",
            level="Nasional",
        )
    )
    projects = [
        ProjectItem(id="p1", title="Irigasi IoT", author="Tim SMA", jenjang=LevelId.SMA),
        ProjectItem(id="p2", title="Kantin Digital", author="Tim MI", jenjang=LevelId.MI),
    ]
    journals = [
        JournalItem(
            id="j1",
            title="Zakat & Ekonomi Digital",
            author="Ahmad",
            mentor="Dr. Zainal",
            score=98,
            is_best=True,
            jenjang=LevelId.KAMPUS,
            category="Ekonomi Syariah",
        ),
        JournalItem(
            id="j2",
            title="Eksperimen Bio-Gas Sekolah",
            author="Siswa SMA",
            mentor="Guru Kimia",
            score=92,
            jenjang=LevelId.SMA,
            category="Sains Terapan",
        ),
    ]
    facilities = [
        FacilityItem(id="f1", name="Lab Komputer", type="Ruang", jenjang=LevelId.SMA),
        FacilityItem(id="f5", name="Robotik", type="Ekstra", jenjang=LevelId.SMA),
    ]
    categories = CategoryData(
        news_categories=["Kegiatan", "Prestasi"],
        project_categories=["Sains & Teknologi", "Kewirausahaan"],
        journal_categories=["Ekonomi Syariah", "Sains Terapan"],
        facility_categories=["Ruang", "Ekstra"],
    )
    level_config = {
        LevelId.UMUM: LevelConfig(
            display_name="LPI Al Hidayah", theme_color="slate", type_label="Yayasan"
        ),
        LevelId.MI: LevelConfig(
            display_name="MI Al Hidayah", theme_color="emerald", type_label="MI"
        ),
        LevelId.SMP: LevelConfig(
            display_name="SMP Al Hidayah", theme_color="sky", type_label="SMP"
        ),
        LevelId.SMA: LevelConfig(
            display_name="SMA Al Hidayah", theme_color="indigo", type_label="SMA"
        ),
    }
    return InMemoryContentApi(
        items={
            ContentKind.NEWS: news,
            ContentKind.PROJECTS: projects,
            ContentKind.JOURNALS: journals,
            ContentKind.FACILITIES: facilities,
        },
        categories=categories,
        level_config=level_config,
        stats={
            "UMUM": [Stat(label="Santri", value="1.200")],
            "MA": [Stat(label="Santri", value="300")],
        },
    )


@pytest.fixture
def site_context(rules: Rules, content_api: InMemoryContentApi, clock: FrozenClock) -> SiteContext:
    return SiteContext.create(
        rules,
        Settings(),
        api=content_api,
        clock=clock,
    )


@pytest.fixture
def visitor(site_context: SiteContext) -> VisitorSession:
    """One visitor session on the shared context."""
    return site_context.sessions.open()


@pytest.fixture
def client(site_context: SiteContext) -> Iterator[TestClient]:
    """Test client with the lifespan run (level configuration fetched)."""
    app = create_app(lambda: site_context)
    with TestClient(app) as test_client:
        yield test_client
