"""Pure edits on a checklist thought's items. Each returns a new list."""
from thoughtboard.codecs import ChecklistItem, new_item_id


def add_item(items: list[ChecklistItem], text: str = "") -> list[ChecklistItem]:
    item = ChecklistItem(id=new_item_id(i.id for i in items), text=text)
    return [*items, item]


def remove_item(items: list[ChecklistItem], item_id: str) -> list[ChecklistItem]:
    return [i for i in items if i.id != item_id]


def toggle_item(items: list[ChecklistItem], item_id: str) -> list[ChecklistItem]:
    return [
        i.model_copy(update={"completed": not i.completed}) if i.id == item_id else i
        for i in items
    ]


def update_item_text(items: list[ChecklistItem], item_id: str, text: str) -> list[ChecklistItem]:
    return [i.model_copy(update={"text": text}) if i.id == item_id else i for i in items]
