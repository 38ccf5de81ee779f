"""Platform-neutral message primitives: embeds, select menus and replies."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EmbedField:
    """One labeled value inside an embed."""

    name: str
    value: str
    inline: bool = True


@dataclass(frozen=True)
class Embed:
    """Structured summary card."""

    title: str
    color: int
    description: str | None = None
    fields: tuple[EmbedField, ...] = ()
    footer: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Plain-data form, used for JSON output."""
        return {
            "title": self.title,
            "color": self.color,
            "description": self.description,
            "fields": [{"name": f.name, "value": f.value, "inline": f.inline} for f in self.fields],
            "footer": self.footer,
        }


@dataclass(frozen=True)
class SelectOption:
    """One entry of a select menu."""

    label: str
    value: str
    description: str | None = None


@dataclass(frozen=True)
class SelectMenu:
    """Single-choice menu attached to a reply."""

    custom_id: str
    placeholder: str
    options: tuple[SelectOption, ...]


@dataclass(frozen=True)
class Reply:
    """Full content of a reply message.

    Editing a reply replaces all of it; ``menu=None`` removes any menu shown before.
    """

    content: str | None = None
    embed: Embed | None = None
    menu: SelectMenu | None = None

    def to_dict(self) -> dict[str, object]:
        """Plain-data form, used for JSON output."""
        data: dict[str, object] = {"content": self.content}
        if self.embed is not None:
            data["embed"] = self.embed.to_dict()
        if self.menu is not None:
            data["menu"] = {
                "custom_id": self.menu.custom_id,
                "placeholder": self.menu.placeholder,
                "options": [{"label": o.label, "value": o.value, "description": o.description} for o in self.menu.options],
            }
        return data
