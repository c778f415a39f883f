"""사용자/교사 레포지토리 — 로그인 계정 및 교사 조회 담당.

User Repository — Login account lookups and teacher lookups, including the
bulk fingerprint-badge lookup used by log import.
"""

from typing import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.models.user import Teacher, User
from teacher_attendance.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 레포지토리.

    Extends:
        BaseRepository[User]
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_username(self, db: AsyncSession, username: str) -> User | None:
        """로그인 아이디로 사용자를 조회합니다 — Fetch a user by username."""
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()


class TeacherRepository(BaseRepository[Teacher]):
    """교사 레포지토리.

    Extends:
        BaseRepository[Teacher]
    """

    def __init__(self) -> None:
        super().__init__(Teacher)

    async def get_by_user_id(self, db: AsyncSession, user_id: UUID) -> Teacher | None:
        """로그인 사용자에 연결된 교사를 조회합니다 — Teacher linked to a login user."""
        result = await db.execute(select(Teacher).where(Teacher.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_by_fingerprint_ids(
        self,
        db: AsyncSession,
        fingerprint_ids: Iterable[str],
    ) -> dict[str, Teacher]:
        """지문 장치 ID 목록으로 교사를 한 번에 조회합니다.

        Bulk-resolve device badge ids to teachers in a single query.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            fingerprint_ids: 장치 배지 ID 목록 (Badge ids seen in a batch)

        Returns:
            dict[str, Teacher]: 배지 ID → 교사 매핑, 미등록 ID는 제외
                                (Badge id to teacher; unknown ids are absent)
        """
        ids: set[str] = set(fingerprint_ids)
        if not ids:
            return {}
        result = await db.execute(select(Teacher).where(Teacher.fingerprint_id.in_(ids)))
        return {teacher.fingerprint_id: teacher for teacher in result.scalars().all()}


# 싱글턴 인스턴스 — Singleton instances
user_repository: UserRepository = UserRepository()
teacher_repository: TeacherRepository = TeacherRepository()
