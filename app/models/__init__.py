from .role import Role
from .image import Image
from .admin import Admin
from .teacher import Teacher
from .subject import Subject
from .teacher_subject import TeacherSubject
from .group import Group
from .student import Student
from .test import Test
from .question import Question
from .answer import Answer
from .result import Result
from .result_question import ResultQuestion
from .result_answer import ResultAnswer

__all__ = [
    "Role",
    "Image",
    "Admin",
    "Teacher",
    "Subject",
    "TeacherSubject",
    "Group",
    "Student",
    "Test",
    "Question",
    "Answer",
    "Result",
    "ResultQuestion",
    "ResultAnswer",
]
