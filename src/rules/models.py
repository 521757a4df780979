from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class RangeRule(BaseModel):
    min: int
    max: int


class ContentRules(BaseModel):
    title: RangeRule = RangeRule(min=5, max=200)
    publish_min_content_length: int = 100
    comment_max_length: int = 5000
    slug_max_attempts: int = Field(default=10, ge=1)


class PageRules(BaseModel):
    default_limit: int = Field(ge=1)
    max_limit: int = Field(ge=1)


class PaginationRules(BaseModel):
    posts: PageRules = PageRules(default_limit=10, max_limit=50)
    comments: PageRules = PageRules(default_limit=20, max_limit=100)


class AuthRules(BaseModel):
    jwt_algorithm: str = "HS256"
    jwt_secret_env: str = "CMS_JWT_SECRET"
    role_claim_path: list[str] = Field(default_factory=lambda: ["user_metadata", "role"])
    default_role: str = "viewer"


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)
    log_level: str = "INFO"


class Rules(BaseModel):
    project: ProjectRules
    content: ContentRules = ContentRules()
    pagination: PaginationRules = PaginationRules()
    auth: AuthRules = AuthRules()
    ops: OpsRules = OpsRules()
