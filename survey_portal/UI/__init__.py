from .survey_app import run_app, run_teacher_page

__all__ = ["run_app", "run_teacher_page"]
