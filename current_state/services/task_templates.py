"""Starter task templates offered when a goal is created."""

MAX_SUGGESTIONS = 6


def _t(title: str, energy: str, work_type: str, time_estimate: str, priority: str) -> dict:
    return {
        "title": title,
        "energy_required": energy,
        "work_type": work_type,
        "time_estimate": time_estimate,
        "priority": priority,
    }


GOAL_TASK_TEMPLATES: dict[str, list[dict]] = {
    "career": [
        _t("Update resume with recent achievements", "medium", "admin", "medium", "should_do"),
        _t("Update LinkedIn profile", "low", "admin", "short", "should_do"),
        _t("Research companies in target industry", "medium", "steady_focus", "medium", "should_do"),
        _t("Prepare for common interview questions", "high", "deep_work", "long", "could_do"),
        _t("Network on LinkedIn - connect with 10 people", "low", "light_lift", "short", "could_do"),
    ],
    "business": [
        _t("Define your unique value proposition", "high", "deep_work", "long", "must_do"),
        _t("Research competitors and pricing", "medium", "steady_focus", "medium", "must_do"),
        _t("Create basic business plan outline", "high", "deep_work", "long", "should_do"),
        _t("Design minimal viable product (MVP)", "high", "steady_focus", "extended", "must_do"),
        _t("Set up business social media profiles", "low", "admin", "short", "could_do"),
        _t("Register business name and domain", "low", "admin", "short", "should_do"),
    ],
    "finance": [
        _t("Track all expenses for one month", "low", "admin", "short", "must_do"),
        _t("Create monthly budget spreadsheet", "medium", "admin", "medium", "must_do"),
        _t("Research high-yield savings accounts", "low", "steady_focus", "short", "should_do"),
        _t("Set up automated savings transfer", "low", "admin", "tiny", "should_do"),
        _t("Review and cancel unused subscriptions", "low", "admin", "short", "could_do"),
        _t("Research investment options for beginners", "medium", "steady_focus", "medium", "could_do"),
    ],
    "health": [
        _t("Schedule annual physical checkup", "low", "admin", "tiny", "should_do"),
        _t("Plan healthy meals for the week", "medium", "steady_focus", "short", "should_do"),
        _t("Research workout routines for beginners", "low", "steady_focus", "short", "could_do"),
        _t("Set sleep schedule and stick to it", "medium", "admin", "tiny", "must_do"),
        _t("Buy healthy groceries for the week", "medium", "light_lift", "medium", "should_do"),
    ],
    "relationships": [
        _t("Schedule weekly quality time with partner", "low", "light_lift", "tiny", "must_do"),
        _t("Call a friend you haven't talked to in a while", "medium", "light_lift", "short", "should_do"),
        _t("Plan a date night or family outing", "medium", "steady_focus", "short", "could_do"),
        _t("Write thank you notes to 3 people", "low", "steady_focus", "short", "could_do"),
        _t("Join a local community group or club", "medium", "light_lift", "short", "could_do"),
    ],
    "personal": [
        _t("Start a daily journaling practice", "low", "steady_focus", "tiny", "could_do"),
        _t("Learn a new skill - choose one", "high", "steady_focus", "extended", "could_do"),
        _t("Declutter one room or area", "medium", "light_lift", "medium", "could_do"),
        _t("Read one book this month", "low", "steady_focus", "tiny", "could_do"),
        _t("Practice mindfulness or meditation", "low", "deep_work", "tiny", "should_do"),
    ],
}

# (keywords, templates) checked against the goal title
KEYWORD_TEMPLATES: list[tuple[tuple[str, ...], list[dict]]] = [
    (
        ("job", "hire", "career change"),
        [
            _t("Apply to 5 relevant job postings", "medium", "admin", "long", "must_do"),
            _t("Reach out to 3 recruiters on LinkedIn", "medium", "light_lift", "short", "should_do"),
        ],
    ),
    (
        ("launch", "startup", "business"),
        [
            _t("Validate idea - talk to 10 potential customers", "high", "light_lift", "extended", "must_do"),
            _t("Build landing page to collect emails", "high", "steady_focus", "long", "should_do"),
        ],
    ),
    (
        ("save", "debt", "money"),
        [_t("Calculate total debt and create payoff plan", "medium", "admin", "medium", "must_do")],
    ),
    (
        ("weight", "fit", "healthy"),
        [_t("Set up fitness tracking app", "low", "admin", "tiny", "should_do")],
    ),
    (
        ("learn", "skill", "course"),
        [_t("Research and enroll in online course", "medium", "steady_focus", "short", "must_do")],
    ),
]


def suggest_tasks_for_goal(goal_title: str, category: str) -> list[dict]:
    """Keyword-driven suggestions first, then the category defaults, deduplicated by title."""
    lower = goal_title.lower()
    candidates: list[dict] = []
    for keywords, templates in KEYWORD_TEMPLATES:
        if any(keyword in lower for keyword in keywords):
            candidates.extend(templates)
    candidates.extend(GOAL_TASK_TEMPLATES.get(category, []))

    seen = set()
    unique = []
    for template in candidates:
        if template["title"] in seen:
            continue
        seen.add(template["title"])
        unique.append(template)
    return unique[:MAX_SUGGESTIONS]
