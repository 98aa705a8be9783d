from .schema import Question, UserProfile
from .bank import QuestionBank
from .profile import ProfileStore, SkillRules, update_skill_levels
from .selection import select_questions

__all__ = [
    "Question",
    "UserProfile",
    "QuestionBank",
    "ProfileStore",
    "SkillRules",
    "update_skill_levels",
    "select_questions",
]
