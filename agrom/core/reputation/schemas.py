from datetime import datetime

from pydantic import BaseModel, field_validator

from agrom.core.profiles.schemas import UserProfile, single_embed


class Rating(BaseModel):
    id: str
    author_id: str | None = None
    target_id: str | None = None
    stars: int
    comment: str | None = None
    created_at: datetime | None = None
    author: UserProfile | None = None

    model_config = {"extra": "ignore"}

    normalize_author = field_validator("author", mode="before")(single_embed)


class RatingSummary(BaseModel):
    average: float
    count: int

    @property
    def has_ratings(self) -> bool:
        return self.count > 0

    @property
    def label(self) -> str:
        if not self.has_ratings:
            return "Aún no tiene valoraciones"
        noun = "valoración" if self.count == 1 else "valoraciones"
        return f"Promedio de {self.average:g} estrellas basado en {self.count} {noun}"


class RatingForm(BaseModel):
    target_id: str
    stars: int | None = None
    comment: str = ""
    # role the target is rated in; defaults to their profile role
    as_role: str | None = None
