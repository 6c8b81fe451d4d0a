import uuid
import logging
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.llm import get_llm_manager, get_llm_json
from app.core.prompts import QUIZ_PROMPT, IMPROVEMENT_TIP_PROMPT
from app.models.assessment import Assessment as AssessmentModel
from app.schemas.interview import Quiz, QuizQuestion
from app.services.user_service import user_service

# Configure logger for this module
logger = logging.getLogger(__name__)

QUIZ_QUESTION_COUNT = 10


class InterviewService:
    """
    A service class for mock-interview quizzes and their stored assessments.
    """
    def __init__(self, llm: Optional[Any]):
        self.llm = llm

    def generate_quiz(self, db: Session, clerk_user_id: Optional[str]) -> List[QuizQuestion]:
        """
        Generates a technical multiple-choice quiz for the caller's industry.

        Raises:
            HTTPException: 503 Service Unavailable if the LLM is not configured.
            HTTPException: 500 Internal Server Error if the LLM fails or replies with an unusable quiz.
        """
        user = user_service.get_user(db, clerk_user_id)
        if self.llm is None:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="LLM service is not available.")

        skills_clause = f" with expertise in {', '.join(user.skills)}" if user.skills else ""
        prompt = QUIZ_PROMPT.format(
            count=QUIZ_QUESTION_COUNT,
            industry=user.industry or "general",
            skills_clause=skills_clause,
        )
        try:
            quiz = Quiz.model_validate(get_llm_json(self.llm, [{"role": "user", "content": prompt}]))
        except Exception as e:
            logger.error(f"InterviewService: Error generating quiz for user {user.id}: {e}", exc_info=True)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to generate quiz questions")

        logger.info(f"InterviewService: Generated {len(quiz.questions)} quiz questions for user {user.id}.")
        return quiz.questions

    def _improvement_tip(self, industry: Optional[str], wrong_answers: List[Dict[str, Any]]) -> Optional[str]:
        if self.llm is None:
            return None
        wrong_answers_text = "\n\n".join(
            f'Question: "{item["question"]}"\nCorrect Answer: "{item["answer"]}"\nUser Answer: "{item["userAnswer"]}"'
            for item in wrong_answers
        )
        prompt = IMPROVEMENT_TIP_PROMPT.format(industry=industry or "general", wrong_answers=wrong_answers_text)
        try:
            return self.llm.get_response([{"role": "user", "content": prompt}]).strip()
        except Exception as e:
            # The assessment is still worth storing without a tip.
            logger.error(f"InterviewService: Error generating improvement tip: {e}", exc_info=True)
            return None

    def save_quiz_result(
        self,
        db: Session,
        clerk_user_id: Optional[str],
        questions: List[QuizQuestion],
        answers: List[Optional[str]],
    ) -> AssessmentModel:
        """
        Scores a completed quiz and stores it as an assessment.

        Raises:
            HTTPException: 500 Internal Server Error if the assessment cannot be stored.
        """
        user = user_service.get_user(db, clerk_user_id)

        results = [
            {
                "question": question.question,
                "answer": question.correctAnswer,
                "userAnswer": answer,
                "isCorrect": answer == question.correctAnswer,
                "explanation": question.explanation,
            }
            for question, answer in zip(questions, answers)
        ]
        correct = sum(1 for result in results if result["isCorrect"])
        score = round(correct / len(results) * 100, 2) if results else 0.0

        wrong_answers = [result for result in results if not result["isCorrect"]]
        improvement_tip = self._improvement_tip(user.industry, wrong_answers) if wrong_answers else None

        assessment = AssessmentModel(
            id=f"assessment_{uuid.uuid4().hex}",
            userId=user.id,
            quizScore=score,
            questions=results,
            category="Technical",
            improvementTip=improvement_tip,
            createdAt=datetime.now(timezone.utc),
        )
        try:
            db.add(assessment)
            db.commit()
            db.refresh(assessment)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"InterviewService: Error saving quiz result for user {user.id}: {e}", exc_info=True)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save quiz result")

        logger.info(f"InterviewService: Stored assessment {assessment.id} with score {score} for user {user.id}.")
        return assessment

    def get_assessments(self, db: Session, clerk_user_id: Optional[str]) -> List[AssessmentModel]:
        """The caller's assessments, oldest first."""
        user = user_service.get_user(db, clerk_user_id)
        return (
            db.query(AssessmentModel)
            .filter(AssessmentModel.userId == user.id)
            .order_by(AssessmentModel.createdAt.asc())
            .all()
        )


_interview_service: Optional[InterviewService] = None

def get_interview_service() -> InterviewService:
    """
    Dependency function to provide the interview service instance.
    """
    global _interview_service
    if _interview_service is None:
        _interview_service = InterviewService(get_llm_manager())
    return _interview_service
