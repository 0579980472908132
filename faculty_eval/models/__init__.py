from faculty_eval.models.category import Category
from faculty_eval.models.course import Course
from faculty_eval.models.department import Department
from faculty_eval.models.evaluation import Evaluation
from faculty_eval.models.evaluation_form import EvaluationForm
from faculty_eval.models.evaluation_response import EvaluationResponse
from faculty_eval.models.question import Question
from faculty_eval.models.role_details import FacultyDetail, StudentDetail, SupervisorDetail
from faculty_eval.models.user import User

__all__ = [ "Category", "Course", "Department", "Evaluation",
           "EvaluationForm", "EvaluationResponse", "Question",
           "FacultyDetail", "StudentDetail", "SupervisorDetail", "User" ]
