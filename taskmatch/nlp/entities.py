"""Task vocabulary used for entity extraction, intent examples and query cleanup."""

# entity type -> canonical value -> surface forms
TASK_ENTITIES: dict[str, dict[str, tuple[str, ...]]] = {
    "status": {
        "todo": ("todo", "to-do", "pending", "new", "backlog", "not started"),
        "in-progress": (
            "in-progress",
            "in progress",
            "doing",
            "working",
            "ongoing",
            "active",
            "current",
            "wip",
        ),
        "done": ("done", "completed", "finished", "resolved", "closed", "fixed"),
    },
    "readiness": {
        "draft": ("draft", "planning", "idea", "concept", "proposed", "preliminary"),
        "ready": (
            "ready",
            "actionable",
            "prepared",
            "available",
            "good-to-go",
            "startable",
        ),
        "blocked": ("blocked", "stuck", "waiting", "dependent", "halted", "paused"),
    },
    "priority": {
        "high": ("high", "important", "critical", "urgent", "top", "p1", "priority 1"),
        "medium": ("medium", "normal", "standard", "average", "p2", "priority 2"),
        "low": ("low", "minor", "trivial", "p3", "priority 3", "eventually"),
    },
}

# verb -> surface forms that signal a search.action.<verb> intent
ACTION_VERBS: dict[str, tuple[str, ...]] = {
    "fix": ("fix", "fixing", "repair", "debug", "bug", "bugs"),
    "add": ("add", "adding", "create", "implement", "new feature", "build"),
    "update": ("update", "updating", "modify", "change", "changes", "edit"),
    "remove": ("remove", "delete", "drop", "uninstall"),
    "review": ("review", "check", "inspect", "audit"),
}

ENTITY_TERMS_TO_REMOVE: dict[str, dict[str, tuple[str, ...]]] = {
    "status": {
        "todo": ("todo", "to-do", "not started", "pending", "backlog"),
        "in-progress": ("in progress", "in-progress", "ongoing", "current", "active"),
        "done": ("done", "completed", "finished", "closed"),
    },
    "readiness": {
        "draft": ("draft", "planning", "idea"),
        "ready": ("ready", "available", "prepared"),
        "blocked": ("blocked", "stuck", "waiting"),
    },
    "priority": {
        "high": ("high", "important", "critical", "urgent"),
        "medium": ("medium", "normal", "standard", "average"),
        "low": ("low", "minor", "trivial"),
    },
    "action": {
        "create": ("create", "add", "new"),
        "add": ("create", "add", "new"),
        "update": ("update", "modify", "change"),
        "delete": ("delete", "remove"),
        "remove": ("delete", "remove"),
    },
}

# Example utterances per intent for nearest-example classification.
INTENT_EXAMPLES: dict[str, tuple[str, ...]] = {
    "search.status.todo": (
        "show me all todo tasks",
        "find tasks that are not started yet",
        "tasks in my backlog",
    ),
    "search.status.in-progress": (
        "what am I currently working on",
        "show active tasks",
        "tasks that are in progress",
    ),
    "search.status.done": (
        "completed tasks",
        "things I have finished",
        "resolved issues",
    ),
    "search.readiness.draft": ("show me draft tasks", "ideas in planning"),
    "search.readiness.ready": ("tasks ready to start", "what can I work on next"),
    "search.readiness.blocked": ("blocked tasks", "tasks waiting for something"),
    "search.priority.high": ("high priority tasks", "urgent items", "critical issues"),
    "search.priority.medium": ("normal priority tasks", "medium priority items"),
    "search.priority.low": ("low priority tasks", "minor items"),
    "search.action.fix": ("tasks about fixing bugs", "issues that need repair"),
    "search.action.add": ("tasks about adding features", "new feature implementations"),
    "search.action.update": ("update related tasks", "changes to existing features"),
}
