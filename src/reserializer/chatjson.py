"""Chat component JSON: the Minecraft text-component wire format."""

from __future__ import annotations

import json
from typing import Any

from reserializer.component import (
    ClickAction,
    ClickEvent,
    Component,
    Decoration,
    HoverEvent,
    Score,
    is_color,
)
from reserializer.errors import ComponentError


def to_json(component: Component) -> dict[str, Any]:
    """Convert a component tree to its JSON object form."""
    data: dict[str, Any] = {}

    if component.keybind is not None:
        data["keybind"] = component.keybind
    elif component.translate is not None:
        data["translate"] = component.translate
        if component.translate_args:
            data["with"] = [to_json(arg) for arg in component.translate_args]
    elif component.score is not None:
        score: dict[str, str] = {
            "name": component.score.name,
            "objective": component.score.objective,
        }
        if component.score.value is not None:
            score["value"] = component.score.value
        data["score"] = score
    elif component.selector is not None:
        data["selector"] = component.selector
    else:
        data["text"] = component.text

    if component.color is not None:
        data["color"] = component.color
    for decoration in Decoration:
        state = component.decoration(decoration)
        if state is not None:
            data[decoration.value] = state
    if component.click_event is not None:
        data["clickEvent"] = {
            "action": component.click_event.action.value,
            "value": component.click_event.value,
        }
    if component.hover_event is not None:
        data["hoverEvent"] = {
            "action": "show_text",
            "contents": to_json(component.hover_event.contents),
        }
    if component.children:
        data["extra"] = [to_json(child) for child in component.children]

    return data


def from_json(data: Any, path: str = "$") -> Component:
    """Build a component from parsed JSON (string, list, or object)."""
    if isinstance(data, str):
        return Component.of(data)
    if isinstance(data, list):
        if not data:
            raise ComponentError("empty component list", path)
        first = from_json(data[0], f"{path}[0]")
        rest = [from_json(item, f"{path}[{i}]") for i, item in enumerate(data[1:], start=1)]
        return first.append(*rest)
    if not isinstance(data, dict):
        raise ComponentError(f"expected string, list or object, got {type(data).__name__}", path)

    component = _content_from_json(data, path)

    color = data.get("color")
    if color is not None:
        if not isinstance(color, str) or not is_color(color):
            raise ComponentError(f"invalid color: {color!r}", f"{path}.color")
        component = component.with_color(color)

    for decoration in Decoration:
        state = data.get(decoration.value)
        if state is None:
            continue
        if not isinstance(state, bool):
            raise ComponentError("decoration must be a boolean", f"{path}.{decoration.value}")
        component = component.with_decoration(decoration, state)

    if "clickEvent" in data:
        click = _click_from_json(data["clickEvent"], f"{path}.clickEvent")
        component = component.with_click(click)
    if "hoverEvent" in data:
        hover = _hover_from_json(data["hoverEvent"], f"{path}.hoverEvent")
        component = component.with_hover(hover)

    extra = data.get("extra")
    if extra is not None:
        if not isinstance(extra, list):
            raise ComponentError("extra must be a list", f"{path}.extra")
        component = component.with_children(
            [from_json(child, f"{path}.extra[{i}]") for i, child in enumerate(extra)]
        )

    return component


def _content_from_json(data: dict[str, Any], path: str) -> Component:
    if "keybind" in data:
        return Component.keybind_of(_string(data["keybind"], f"{path}.keybind"))
    if "translate" in data:
        args = data.get("with", [])
        if not isinstance(args, list):
            raise ComponentError("with must be a list", f"{path}.with")
        return Component.translatable(
            _string(data["translate"], f"{path}.translate"),
            *(from_json(arg, f"{path}.with[{i}]") for i, arg in enumerate(args)),
        )
    if "score" in data:
        score = data["score"]
        if not isinstance(score, dict):
            raise ComponentError("score must be an object", f"{path}.score")
        value = score.get("value")
        return Component(
            score=Score(
                _string(score.get("name"), f"{path}.score.name"),
                _string(score.get("objective"), f"{path}.score.objective"),
                None if value is None else str(value),
            )
        )
    if "selector" in data:
        return Component.selector_of(_string(data["selector"], f"{path}.selector"))
    return Component.of(_string(data.get("text", ""), f"{path}.text"))


def _click_from_json(data: Any, path: str) -> ClickEvent:
    if not isinstance(data, dict):
        raise ComponentError("clickEvent must be an object", path)
    try:
        action = ClickAction(data.get("action"))
    except ValueError:
        raise ComponentError(f"unknown click action: {data.get('action')!r}", path) from None
    return ClickEvent(action, _string(data.get("value"), f"{path}.value"))


def _hover_from_json(data: Any, path: str) -> HoverEvent:
    if not isinstance(data, dict):
        raise ComponentError("hoverEvent must be an object", path)
    if data.get("action") != "show_text":
        raise ComponentError(f"unsupported hover action: {data.get('action')!r}", path)
    # "value" is the pre-1.16 spelling
    contents = data["contents"] if "contents" in data else data.get("value")
    if contents is None:
        raise ComponentError("hoverEvent has no contents", path)
    return HoverEvent(from_json(contents, f"{path}.contents"))


def _string(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise ComponentError("expected a string", path)
    return value


def dumps(component: Component, indent: int | None = None) -> str:
    return json.dumps(to_json(component), indent=indent, ensure_ascii=False)


def loads(text: str) -> Component:
    """Parse chat JSON text into a component."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ComponentError(
            f"invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})"
        ) from None
    return from_json(data)
