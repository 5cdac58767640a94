from __future__ import annotations

from survey_portal.UI import responses, run_teacher_page

run_teacher_page("Survey Responses", "🗂️", responses.render)
