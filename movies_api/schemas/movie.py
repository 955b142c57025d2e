"""Pydantic schemas for movie API requests and responses."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from movies_api.models.movie import Movie


def _coerce_genres(v: Any) -> Any:
    # Anything that is not a JSON array becomes an empty genre list
    if v is None:
        return v
    if not isinstance(v, list):
        return []
    return [str(genre) for genre in v]


class CreateMovieRequest(BaseModel):
    """
    Request schema for creating a movie.

    Attributes:
        title: Movie title (required, non-blank)
        year: Release year (required, coerced to int)
        rating: Numeric rating (default 0)
        genres: Genre labels (default [])
        plot: Synopsis (default "")
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "title": "Arrival",
                "year": 2016,
                "rating": 7.9,
                "genres": ["Drama", "Sci-Fi"],
                "plot": "A linguist works to communicate with alien visitors.",
            }
        },
    )

    title: str = Field(..., min_length=1, description="Movie title")
    year: int = Field(..., ge=1, description="Release year")
    rating: float = Field(default=0.0, description="Rating")
    genres: List[str] = Field(default_factory=list, description="Genre labels")
    plot: str = Field(default="", description="Synopsis")

    @field_validator("genres", mode="before")
    @classmethod
    def coerce_genres(cls, v: Any) -> Any:
        if v is None:
            return []
        return _coerce_genres(v)

    @field_validator("rating", "plot", mode="before")
    @classmethod
    def default_when_null(cls, v: Any, info: ValidationInfo) -> Any:
        """Explicit nulls fall back to the field default."""
        if v is None:
            return 0.0 if info.field_name == "rating" else ""
        return v


class UpdateMovieRequest(BaseModel):
    """
    Request schema for a partial movie update.

    Only fields present in the body are written; the rest keep their stored
    values. Supplied fields obey the same constraints as on create. An
    explicit null clears genres and is ignored for every other field.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={"example": {"rating": 9.1}},
    )

    title: Optional[str] = Field(None, min_length=1, description="Movie title")
    year: Optional[int] = Field(None, ge=1, description="Release year")
    rating: Optional[float] = Field(None, description="Rating")
    genres: Optional[List[str]] = Field(None, description="Genre labels")
    plot: Optional[str] = Field(None, description="Synopsis")

    @field_validator("genres", mode="before")
    @classmethod
    def coerce_genres(cls, v: Any) -> Any:
        # Only runs for a supplied value, so null here was sent explicitly
        if v is None:
            return []
        return _coerce_genres(v)

    def changes(self) -> dict[str, Any]:
        """Return the supplied fields as a plain dict."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class MovieResponse(BaseModel):
    """Envelope for a single movie."""

    data: Movie = Field(..., description="Movie")


class MovieListResponse(BaseModel):
    """Envelope for a page of movies."""

    data: List[Movie] = Field(..., description="Movies")


class DeleteMovieResponse(BaseModel):
    """Acknowledgement of a deletion."""

    ok: bool = Field(True, description="Deletion succeeded")
