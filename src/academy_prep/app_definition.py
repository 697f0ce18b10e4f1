"""Academy Prep MCP App: pure Python config, no custom JS/CSS."""

from mcpbundles_app_ui import App, Card, DarkTheme


class AcademyPrepApp(App):
    """Application readiness dashboard. Tabbed engine and views come from the library."""

    name = "Academy Prep"
    subtitle = "Grades, GPA, CFA fitness and application goals"
    theme = DarkTheme(
        accent="#2563eb",
        bg_page="#0b1220",
        bg_card="#162033",
        bg_hover="#1f2c45",
        text_primary="#f1f5f9",
        text_secondary="#e2e8f0",
        text_muted="#94a3b8",
        border="#2b3a55",
        success="#10b981",
        warning="#f59e0b",
        error="#ef4444",
        chart_colors=[
            "#2563eb", "#10b981", "#f59e0b", "#ef4444",
            "#8b5cf6", "#06b6d4",
        ],
    )

    layout = [Card(title="")]

    tool_name = "open_prep_app"
    tabs = [
        {"id": "overview", "label": "Overview", "tool": "open_prep_app", "type": "dashboard"},
        {"id": "courses", "label": "Courses", "tool": "prep_courses", "type": "dashboard"},
        {"id": "gpa", "label": "GPA", "tool": "prep_gpa", "type": "dashboard"},
        {"id": "fitness", "label": "Fitness", "tool": "prep_fitness", "type": "dashboard"},
        {"id": "goals", "label": "Goals", "tool": "prep_goals", "type": "dashboard"},
        {"id": "analysis", "label": "Analysis", "tool": "prep_grade_analysis", "type": "dashboard"},
        {
            "id": "prediction", "label": "Prediction", "tool": "prep_grade_prediction", "type": "dashboard",
            "needsArgs": True,
            "promptTitle": "Project a course's final grade",
            "promptHint": 'Ask your AI \u2014 e.g., "what do I need on the chemistry final for a B+?"',
        },
        {"id": "tools", "label": "Tools", "tool": None, "type": "tools"},
    ]
    footer_text = "Grades \u00b7 CFA \u00b7 Goals"

    tool_catalog_intro = (
        "This server provides <strong>15 tools</strong> your AI can call directly. "
        "Seven record or change data in a local database, seven compute scores from it, "
        "and one opens this interactive app. "
        "Scores are always recomputed from your records \u2014 nothing is cached except the last application progress."
    )
    tool_catalog = [
        {"name": "open_prep_app", "label": "Open Academy Prep", "icon": "\U0001f393", "desc": "Opens this dashboard with GPA, CFA score and overall application progress.", "usage": "No arguments needed \u2014 just call it.", "source": "Local SQLite"},
        {"name": "prep_add_course", "label": "Add Course", "icon": "\U0001f4da", "desc": "Add a course with credits and AP flag.", "usage": 'prep_add_course(name="AP Calculus BC", credits=1, is_ap=True)', "source": "Local SQLite", "stateful": True},
        {"name": "prep_add_grade", "label": "Add Grade", "icon": "\U0001f4dd", "desc": "Record a graded item. Score must be between 0 and the max score.", "usage": 'prep_add_grade(course_id="...", score=92, max_score=100)', "source": "Local SQLite", "stateful": True},
        {"name": "prep_add_exercise", "label": "Add CFA Result", "icon": "\U0001f3c3", "desc": "Record a CFA event result or a custom exercise.", "usage": 'prep_add_exercise(exercise_type="Pull-ups", value=12)', "source": "Local SQLite", "stateful": True},
        {"name": "prep_add_goal", "label": "Add Goal", "icon": "\U0001f3af", "desc": "Add an academic, fitness or application goal.", "usage": 'prep_add_goal(title="Secure congressional nomination", category="Application")', "source": "Local SQLite", "stateful": True},
        {"name": "prep_update_goal", "label": "Update Goal", "icon": "\u270f\ufe0f", "desc": "Change a goal's progress or mark it complete.", "usage": 'prep_update_goal(goal_id="...", progress=60)', "source": "Local SQLite", "stateful": True},
        {"name": "prep_delete_record", "label": "Delete Record", "icon": "\U0001f5d1\ufe0f", "desc": "Delete a course (with its grades), grade, exercise or goal.", "usage": 'prep_delete_record(kind="grade", record_id="...")', "source": "Local SQLite", "stateful": True},
        {"name": "prep_set_gender", "label": "Set CFA Standards", "icon": "\u2699\ufe0f", "desc": "Choose the male or female CFA standards table.", "usage": 'prep_set_gender(gender="female")', "source": "Local SQLite", "stateful": True},
        {"name": "prep_courses", "label": "Courses", "icon": "\U0001f4d6", "desc": "All courses with current average and letter grade.", "usage": "prep_courses()", "source": "Computed"},
        {"name": "prep_gpa", "label": "GPA", "icon": "\U0001f4ca", "desc": "Credit-weighted GPA with AP bonus, and each course's contribution.", "usage": "prep_gpa()", "source": "Computed"},
        {"name": "prep_fitness", "label": "CFA Fitness", "icon": "\U0001f4aa", "desc": "CFA score, per-event progress and the standards table with your status.", "usage": "prep_fitness()", "source": "Computed"},
        {"name": "prep_goals", "label": "Goals", "icon": "\u2705", "desc": "Goals with completion summary and overdue count.", "usage": 'prep_goals(category="")', "source": "Computed"},
        {"name": "prep_application_progress", "label": "Application Progress", "icon": "\U0001f6e1\ufe0f", "desc": "Overall application readiness from GPA, CFA score and application goals.", "usage": "prep_application_progress()", "source": "Computed"},
        {"name": "prep_grade_analysis", "label": "Grade Analysis", "icon": "\U0001f4c8", "desc": "Grade distribution, monthly trends and cross-course comparison.", "usage": "prep_grade_analysis()", "source": "Computed"},
        {"name": "prep_grade_prediction", "label": "Grade Prediction", "icon": "\U0001f52e", "desc": "Projected final grade, GPA impact, and the score needed for a target.", "usage": 'prep_grade_prediction(course_id="...", target_percentage=87)', "source": "Computed"},
    ]
