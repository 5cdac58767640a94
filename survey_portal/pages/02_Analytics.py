from __future__ import annotations

from survey_portal.UI import analytics, run_teacher_page

run_teacher_page("Survey Analytics", "📊", analytics.render)
