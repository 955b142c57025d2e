"""Movie repository for DynamoDB operations."""

from typing import Any, Dict, List, Optional

import aioboto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from movies_api.config import settings
from movies_api.models.movie import Movie
from movies_api.repositories.base import BaseRepository
from movies_api.utils.serialization import (
    decode_genres,
    encode_genres,
    from_dynamodb_number,
    to_dynamodb_number,
)

# Attributes a partial update may set. Always addressed through #name
# placeholders since YEAR is a DynamoDB reserved word.
UPDATABLE_FIELDS = ("title", "year", "rating", "genres", "plot")


class MovieRepository(BaseRepository):
    """
    Repository for Movie operations in DynamoDB.

    Every mutation is a single-item write; concurrent updates to the same
    movie resolve as last-write-wins.
    """

    def __init__(self, session: aioboto3.Session | None = None) -> None:
        """Initialize MovieRepository with the movies table."""
        super().__init__(settings.dynamodb_table_movies, session)

    def _deserialize_movie(self, item: Dict[str, Any]) -> Movie:
        """
        Convert DynamoDB item to Movie model.

        Args:
            item: DynamoDB item dict

        Returns:
            Movie with numbers converted back from Decimal and genres decoded
        """
        return Movie(
            id=item["id"],
            title=str(item.get("title", "")),
            year=from_dynamodb_number(item.get("year"), as_int=True),
            rating=from_dynamodb_number(item.get("rating")),
            genres=decode_genres(item.get("genres")),
            plot=str(item.get("plot") or ""),
            created_at=str(item.get("createdAt", "")),
        )

    def _serialize_value(self, field: str, value: Any) -> Any:
        if field == "year":
            return to_dynamodb_number(int(value))
        if field == "rating":
            return to_dynamodb_number(float(value))
        if field == "genres":
            return encode_genres(value)
        return str(value)

    def _serialize_movie(self, movie: Movie) -> Dict[str, Any]:
        item: Dict[str, Any] = {"id": movie.id, "createdAt": movie.created_at}
        for field in UPDATABLE_FIELDS:
            item[field] = self._serialize_value(field, getattr(movie, field))
        return item

    async def create(self, movie: Movie) -> Movie:
        """
        Store a new movie.

        Args:
            movie: Movie model with a freshly generated id

        Returns:
            The created Movie

        Raises:
            ClientError: ConditionalCheckFailedException if the id exists
        """
        await self.put_item(
            self._serialize_movie(movie),
            condition_expression="attribute_not_exists(id)",
        )
        return movie

    async def get_by_id(self, movie_id: str) -> Optional[Movie]:
        """
        Get movie by ID.

        Args:
            movie_id: Movie partition key

        Returns:
            Movie if found, None otherwise
        """
        item = await self.get_item({"id": movie_id})
        if item:
            return self._deserialize_movie(item)
        return None

    async def list_movies(
        self,
        q: str | None = None,
        year: int | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Movie]:
        """
        List movies ordered by rating desc, year desc, title asc.

        Args:
            q: Case-insensitive substring matched against title or plot
            year: Exact release year
            limit: Maximum number of movies to return
            offset: Number of matching movies to skip

        Returns:
            One page of movies
        """
        scan_kwargs: Dict[str, Any] = {}
        if year is not None:
            scan_kwargs["FilterExpression"] = Attr("year").eq(year)

        items = await self.scan_all(**scan_kwargs)
        movies = [self._deserialize_movie(item) for item in items]

        if q:
            needle = q.lower()
            movies = [
                movie
                for movie in movies
                if needle in movie.title.lower() or needle in movie.plot.lower()
            ]

        movies.sort(key=lambda movie: movie.title)
        movies.sort(key=lambda movie: (movie.rating, movie.year), reverse=True)

        return movies[offset : offset + limit]

    async def update(
        self, movie_id: str, fields: Dict[str, Any]
    ) -> Optional[Movie]:
        """
        Overwrite only the supplied fields of an existing movie.

        Args:
            movie_id: Movie partition key
            fields: Subset of title/year/rating/genres/plot to set

        Returns:
            The merged Movie, or None if the movie does not exist
        """
        changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        if not changes:
            return await self.get_by_id(movie_id)

        assignments = []
        expr_names: Dict[str, str] = {}
        expr_values: Dict[str, Any] = {}
        for field, value in changes.items():
            assignments.append(f"#{field} = :{field}")
            expr_names[f"#{field}"] = field
            expr_values[f":{field}"] = self._serialize_value(field, value)

        try:
            attributes = await self.update_item(
                key={"id": movie_id},
                update_expression="SET " + ", ".join(assignments),
                expression_values=expr_values,
                expression_names=expr_names,
                condition_expression="attribute_exists(id)",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return None
            raise

        return self._deserialize_movie(attributes)

    async def delete(self, movie_id: str) -> bool:
        """
        Delete a movie.

        Args:
            movie_id: Movie partition key

        Returns:
            True if a movie was removed, False if it did not exist
        """
        old = await self.delete_item({"id": movie_id})
        return old is not None

    async def is_empty(self) -> bool:
        """Return True when the catalog holds no movies."""
        async with self.resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            response = await table.scan(Limit=1)
            return not response.get("Items")
