from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional, List
from datetime import datetime

class QuizQuestion(BaseModel):
    question: str
    options: List[str] = Field(..., min_length=2)
    correctAnswer: str
    explanation: str = ""

class Quiz(BaseModel):
    questions: List[QuizQuestion]

class QuizResultCreate(BaseModel):
    """
    A completed quiz: the questions as served plus the user's answers, in order.
    """
    questions: List[QuizQuestion]
    answers: List[Optional[str]]

    @model_validator(mode='after')
    def check_answers(self) -> 'QuizResultCreate':
        if len(self.answers) != len(self.questions):
            raise ValueError("Exactly one answer is required per question")
        return self

class QuestionResult(BaseModel):
    question: str
    answer: str
    userAnswer: Optional[str] = None
    isCorrect: bool
    explanation: str = ""

class AssessmentInDB(BaseModel):
    id: str
    userId: str
    quizScore: float
    questions: List[QuestionResult]
    category: str
    improvementTip: Optional[str] = None
    createdAt: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
