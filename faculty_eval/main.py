from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from faculty_eval.api.auth import router as auth_router
from faculty_eval.api.categories import router as categories_router
from faculty_eval.api.courses import router as courses_router
from faculty_eval.api.departments import router as departments_router
from faculty_eval.api.evaluations import router as evaluations_router
from faculty_eval.api.forms import router as forms_router
from faculty_eval.api.health import router as health_router
from faculty_eval.api.questions import router as questions_router
from faculty_eval.api.reports import router as reports_router
from faculty_eval.api.root import router as root_router
from faculty_eval.api.users import router as users_router
from faculty_eval.core.config import settings
from faculty_eval.core.errors import register_exception_handlers
from faculty_eval.core.logging_config import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Faculty Evaluation API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ORIGINS != "*",
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(root_router)
app.include_router(health_router)

for router in (
    auth_router,
    users_router,
    departments_router,
    courses_router,
    categories_router,
    questions_router,
    forms_router,
    evaluations_router,
    reports_router,
):
    app.include_router(router, prefix=settings.API_PREFIX)
