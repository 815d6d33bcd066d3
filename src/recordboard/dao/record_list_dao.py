"""Data Access Object for record lists."""

from supabase import Client

from recordboard.dao.base import BaseDAO
from recordboard.models.record_list import CourseType, ListGender, RecordList


class RecordListDAO(BaseDAO[RecordList]):
    """DAO for RecordList entities.

    Deleting a list cascades to its records in the database.
    """

    table_name = "record_lists"
    model_class = RecordList
    duplicate_message = "A record list with this slug already exists. Please choose a different URL."

    def __init__(self, client: Client | None = None):
        super().__init__(client)

    def find_by_club(self, club_id: str) -> list[RecordList]:
        """All lists of a club, oldest first."""
        result = self._run(
            self.table.select("*").eq("club_id", club_id).order("created_at")
        )
        return [self._to_model(row) for row in result.data]

    def find_by_slug(self, club_id: str, slug: str) -> RecordList | None:
        result = self._run(
            self.table.select("*").eq("club_id", club_id).eq("slug", slug).limit(1)
        )
        if not result.data:
            return None
        return self._to_model(result.data[0])

    def find_first(self, club_id: str) -> RecordList | None:
        """The club's earliest-created list (the default public board)."""
        result = self._run(
            self.table.select("*").eq("club_id", club_id).order("created_at").limit(1)
        )
        if not result.data:
            return None
        return self._to_model(result.data[0])

    def _to_model(self, row: dict) -> RecordList:
        return RecordList(
            id=str(row["id"]),
            club_id=str(row["club_id"]),
            title=row["title"],
            slug=row["slug"],
            course_type=CourseType(row.get("course_type") or CourseType.LCM),
            gender=ListGender(row["gender"]) if row.get("gender") else None,
            created_at=row.get("created_at"),
        )

    def _to_db(self, model: RecordList) -> dict:
        data = {
            "club_id": model.club_id,
            "title": model.title,
            "slug": model.slug,
            "course_type": model.course_type.value,
            "gender": model.gender.value if model.gender else None,
        }
        if model.id:
            data["id"] = model.id
        return data
