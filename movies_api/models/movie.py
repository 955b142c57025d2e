"""Movie model for DynamoDB."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Movie(BaseModel):
    """
    Movie record in the catalog.

    Attributes:
        id: Server-generated identifier (immutable)
        title: Movie title
        year: Release year
        rating: Numeric rating (0-10 by convention)
        genres: Ordered genre labels
        plot: Free-text synopsis
        created_at: ISO 8601 timestamp of record creation
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "mv_inception",
                "title": "Inception",
                "year": 2010,
                "rating": 8.8,
                "genres": ["Action", "Sci-Fi"],
                "plot": "A thief enters dreams to steal secrets.",
                "createdAt": "2025-11-11T12:00:00Z",
            }
        },
    )

    id: str = Field(..., description="Movie identifier")
    title: str = Field(..., description="Movie title")
    year: int = Field(..., description="Release year")
    rating: float = Field(default=0.0, description="Rating")
    genres: List[str] = Field(default_factory=list, description="Genre labels")
    plot: str = Field(default="", description="Synopsis")
    created_at: str = Field(
        ..., alias="createdAt", description="ISO 8601 creation timestamp"
    )
