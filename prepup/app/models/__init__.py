from prepup.app.models.user import User
from prepup.app.models.resume import Resume, ResumeHistory
from prepup.app.models.question import Question
