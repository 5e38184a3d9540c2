from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi_pagination import add_pagination
from loguru import logger

# --- ADMIN ROUTES ---
from academy.api.v1.admin import messages as admin_messages
from academy.api.v1.admin import quiz_results as admin_quiz_results
from academy.api.v1.admin import subscriptions as admin_subscriptions
from academy.api.v1.admin import teachers as admin_teachers
from academy.api.v1.admin import users as admin_users

# ===== IMPORT ROUTERS =====
from academy.api.v1 import auth
from academy.api.v1.shares import certificates, curriculum, timetables, upload

# --- TEACHER ROUTES ---
from academy.api.v1.teacher import chapters as teacher_chapters
from academy.api.v1.teacher import courses as teacher_courses
from academy.api.v1.teacher import livestreams as teacher_livestreams
from academy.api.v1.teacher import quizzes as teacher_quizzes
from academy.api.v1.teacher import submissions as teacher_submissions
from academy.api.v1.teacher import users as teacher_users

# --- USER ROUTES ---
from academy.api.v1.user import chapters as user_chapters
from academy.api.v1.user import courses as user_courses
from academy.api.v1.user import dashboard, subscriptions
from academy.api.v1.user import livestreams as user_livestreams
from academy.api.v1.user import quizzes as user_quizzes
from academy.api.v1.user import student as user_student
from academy.core.logging import setup_logging
from academy.core.scheduler import scheduler, start_scheduler
from academy.core.settings import settings

# --- MIDDLEWARE ---
from academy.middleware.request_context import RequestContextMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)

    # ================================
    # 1) START APSCHEDULER
    # ================================
    if settings.SCHEDULER_ENABLED:
        start_scheduler()
        logger.info("⏱ Scheduler started")

    try:
        yield
    finally:
        # ================================
        # 2) STOP SCHEDULER
        # ================================
        if scheduler.running:
            try:
                scheduler.shutdown(wait=False)
                logger.info("🛑 Scheduler stopped")
            except Exception as e:
                logger.warning(f"⚠ Scheduler shutdown error: {e}")


# ===== APP CONFIG =====
app = FastAPI(
    title="Academy API",
    description="Courses, chapters, quizzes, live streams and subscriptions for students and staff",
    version="0.1.0",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


app.add_middleware(RequestContextMiddleware)
prefix = "/api"

# ===== REGISTER ROUTERS =====

# --- Share ---
app.include_router(auth.router, prefix=prefix)
app.include_router(curriculum.router, prefix=prefix)
app.include_router(certificates.router, prefix=prefix)
app.include_router(timetables.router, prefix=prefix)
app.include_router(upload.router, prefix=prefix)

# --- USER ROUTES ---
app.include_router(user_courses.router, prefix=prefix)
app.include_router(user_chapters.router, prefix=prefix)
app.include_router(user_quizzes.router, prefix=prefix)
app.include_router(user_livestreams.router, prefix=prefix)
app.include_router(dashboard.router, prefix=prefix)
app.include_router(subscriptions.router, prefix=prefix)
app.include_router(user_student.router, prefix=prefix)

# --- TEACHER ROUTES ---
app.include_router(teacher_courses.router, prefix=prefix)
app.include_router(teacher_chapters.router, prefix=prefix)
app.include_router(teacher_quizzes.router, prefix=prefix)
app.include_router(teacher_livestreams.router, prefix=prefix)
app.include_router(teacher_submissions.router, prefix=prefix)
app.include_router(teacher_users.router, prefix=prefix)

# --- ADMIN ROUTES ---
app.include_router(admin_users.router, prefix=prefix)
app.include_router(admin_messages.router, prefix=prefix)
app.include_router(admin_teachers.router, prefix=prefix)
app.include_router(admin_subscriptions.router, prefix=prefix)
app.include_router(admin_quiz_results.router, prefix=prefix)
add_pagination(app)

# --- UPLOADED FILES ---
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")


# ===== ROOT =====
@app.get("/")
async def hello_world():
    return {"message": "Academy API"}


if __name__ == "__main__":
    uvicorn.run("academy.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
