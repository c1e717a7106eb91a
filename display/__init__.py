from .lesson_status import (
    LessonStatus,
    ListItem,
    ListStatus,
    StatusSnapshot,
    build_lesson_list,
    lesson_status,
    split_lesson_list,
)

__all__ = [
    "LessonStatus",
    "ListItem",
    "ListStatus",
    "StatusSnapshot",
    "build_lesson_list",
    "lesson_status",
    "split_lesson_list",
]
