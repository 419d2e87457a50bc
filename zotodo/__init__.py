"""
Zotodo: Todoist tasks for reference manager items.

Submodules:
- items: item metadata handed over by the host and template tokens
- drafts: TaskDraft
- composer: item + settings -> TaskDraft
- service: ZotodoService, the host-facing entry points
- errors: exception hierarchy
"""
