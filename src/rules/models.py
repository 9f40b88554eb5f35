from pydantic import BaseModel, Field

from src.domain.entities import ContentKind, InstitutionProfile, LevelId, Slide, Testimonial


class ProjectRules(BaseModel):
    slug: str
    school_name: str


class ApiRules(BaseModel):
    base_url: str = "http://127.0.0.1:8000"
    timeout_seconds: float = 15.0
    paths: dict[ContentKind, str] = Field(
        default_factory=lambda: {
            ContentKind.NEWS: "/news",
            ContentKind.PROJECTS: "/projects",
            ContentKind.JOURNALS: "/journals",
            ContentKind.FACILITIES: "/facilities",
        }
    )
    best_journals_path: str = "/journals/best"
    categories_path: str = "/categories"
    levels_path: str = "/jenjang"
    home_path: str = "/home"

    def path_for(self, kind: ContentKind) -> str:
        return self.paths.get(kind, f"/{kind.value}")


class LevelRules(BaseModel):
    known: list[LevelId] = Field(default_factory=lambda: list(LevelId))


class HomeLimits(BaseModel):
    news: int = 3
    projects: int = 3
    journals: int = 4
    best_journals: int = 3


class CacheRules(BaseModel):
    page_size: int = 6
    page_increment: int = 6
    admin_ttl_seconds: int = 300
    related_count: int = 3
    home_limits: HomeLimits = Field(default_factory=HomeLimits)


class SessionRules(BaseModel):
    cookie_name: str = "site_session"
    max_sessions: int = Field(default=1000, ge=1)


class MarketingRules(BaseModel):
    slides: list[Slide] = Field(default_factory=list)
    testimonials: list[Testimonial] = Field(default_factory=list)
    profile: InstitutionProfile | None = None


class AssistantRules(BaseModel):
    chat_model: str = "gemini-3-flash-preview"
    draft_model: str = "gemini-3-pro-preview"
    chat_temperature: float = 0.7
    draft_temperature: float = 0.8
    system_instruction: str
    draft_prompt_template: str
    unavailable_reply: str
    empty_reply: str
    error_reply: str
    draft_unavailable_reply: str
    draft_empty_reply: str


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    project: ProjectRules
    api: ApiRules = Field(default_factory=ApiRules)
    levels: LevelRules = Field(default_factory=LevelRules)
    cache: CacheRules = Field(default_factory=CacheRules)
    sessions: SessionRules = Field(default_factory=SessionRules)
    marketing: MarketingRules = Field(default_factory=MarketingRules)
    assistant: AssistantRules
    ops: OpsRules = Field(default_factory=OpsRules)
