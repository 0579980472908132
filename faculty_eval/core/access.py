from fastapi import HTTPException

from faculty_eval.models.evaluation import Evaluation
from faculty_eval.models.user import User

# evaluator role -> evaluatee roles it may evaluate
EVALUATION_FLOWS: dict[str, set[str]] = {
    "Student": {"Faculty"},
    "Supervisor": {"Faculty"},
    "Faculty": {"Faculty"},  # self-evaluation only, checked below
}


def assert_can_evaluate(evaluator: User, evaluatee: User):
    if evaluator.is_admin or evaluator.role not in EVALUATION_FLOWS:
        raise HTTPException(status_code=403, detail="Your role cannot submit evaluations")

    if evaluatee.role not in EVALUATION_FLOWS[evaluator.role]:
        raise HTTPException(status_code=403, detail=f"{evaluator.role} users cannot evaluate {evaluatee.role or 'this user'}")

    if evaluator.role == "Faculty" and evaluator.id != evaluatee.id:
        raise HTTPException(status_code=403, detail="Faculty can only submit a self-evaluation")


def assert_can_view_evaluation(user: User, evaluation: Evaluation):
    if user.is_admin:
        return
    if user.id not in (evaluation.evaluator_id, evaluation.evaluatee_id):
        raise HTTPException(status_code=403, detail="Only the evaluator or evaluatee can view this evaluation")
