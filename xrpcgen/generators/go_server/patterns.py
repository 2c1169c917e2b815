"""Go helper types emitted into types.go."""
from typing import List, Union

from xrpcgen.framework.types import GeneratedUtility
from xrpcgen.framework.utils import to_pascal_case


def go_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def create_go_enum_pattern(name: str, values: List[Union[str, int, float]]) -> GeneratedUtility:
    """String-backed enum type with constants, IsValid, Parse and All helpers."""
    labels = [str(v) for v in values]
    consts = "\n".join(
        f"\t{name}{to_pascal_case(label) or 'Empty'} {name} = {go_string(label)}" for label in labels
    )
    cases = ", ".join(f"{name}{to_pascal_case(label) or 'Empty'}" for label in labels)
    code = f"""type {name} string

const (
{consts}
)

func (e {name}) IsValid() bool {{
	switch e {{
	case {cases}:
		return true
	}}
	return false
}}

func Parse{name}(s string) ({name}, error) {{
	e := {name}(s)
	if !e.IsValid() {{
		return "", fmt.Errorf("invalid {name}: %s", s)
	}}
	return e, nil
}}

func All{name}Values() []{name} {{
	return []{name}{{{cases}}}
}}"""
    return GeneratedUtility(
        id=f"enum_{name}",
        code=code,
        imports=["fmt"],
        include_once=True,
        priority=100,
    )


def create_go_datetime_pattern() -> GeneratedUtility:
    code = """// DateTime accepts the common ISO-8601 layouts and marshals as RFC 3339.
type DateTime struct {
	time.Time
}

var dateTimeLayouts = []string{
	time.RFC3339Nano,
	time.RFC3339,
	"2006-01-02T15:04:05",
	"2006-01-02",
}

func (d *DateTime) UnmarshalJSON(data []byte) error {
	var s string
	if err := json.Unmarshal(data, &s); err != nil {
		return err
	}
	for _, layout := range dateTimeLayouts {
		if t, err := time.Parse(layout, s); err == nil {
			d.Time = t
			return nil
		}
	}
	return fmt.Errorf("invalid date-time: %s", s)
}

func (d DateTime) MarshalJSON() ([]byte, error) {
	return json.Marshal(d.Time.Format(time.RFC3339Nano))
}"""
    return GeneratedUtility(
        id="datetime",
        code=code,
        imports=["encoding/json", "fmt", "time"],
        include_once=True,
        priority=85,
    )


def create_go_union_pattern(name: str, variants: List[str]) -> GeneratedUtility:
    """Wrapper holding any variant, with one typed accessor per variant."""
    accessors = []
    seen = set()
    for variant in variants:
        label = to_pascal_case(variant.replace("[]", "ListOf").replace("*", "")
                               .replace("map[string]", "MapOf").replace("interface{}", "Any"))
        if label in seen:
            continue
        seen.add(label)
        accessors.append(f"""func (u {name}) As{label}() ({variant}, bool) {{
	v, ok := u.Value.({variant})
	return v, ok
}}""")
    code = f"""// {name} holds one of: {", ".join(variants)}.
type {name} struct {{
	Value interface{{}}
}}

func (u {name}) MarshalJSON() ([]byte, error) {{
	return json.Marshal(u.Value)
}}

func (u *{name}) UnmarshalJSON(data []byte) error {{
	return json.Unmarshal(data, &u.Value)
}}"""
    if accessors:
        code += "\n\n" + "\n\n".join(accessors)
    return GeneratedUtility(
        id=f"union_{name}",
        code=code,
        imports=["encoding/json"],
        include_once=True,
        priority=80,
    )


def create_go_tuple_pattern(name: str, elements: List[str]) -> GeneratedUtility:
    """Struct with positional fields, marshalled as a fixed-length JSON array."""
    fields = "\n".join(f"\tV{i} {element} `json:\"{i}\"`" for i, element in enumerate(elements))
    values = ", ".join(f"t.V{i}" for i in range(len(elements)))
    decodes = "\n".join(
        f"""	if err := json.Unmarshal(raw[{i}], &t.V{i}); err != nil {{
		return err
	}}""" for i in range(len(elements))
    )
    code = f"""type {name} struct {{
{fields}
}}

func (t {name}) MarshalJSON() ([]byte, error) {{
	return json.Marshal([]interface{{}}{{{values}}})
}}

func (t *{name}) UnmarshalJSON(data []byte) error {{
	var raw []json.RawMessage
	if err := json.Unmarshal(data, &raw); err != nil {{
		return err
	}}
	if len(raw) != {len(elements)} {{
		return fmt.Errorf("{name}: expected {len(elements)} elements, got %d", len(raw))
	}}
{decodes}
	return nil
}}"""
    return GeneratedUtility(
        id=f"tuple_{name}",
        code=code,
        imports=["encoding/json", "fmt"],
        include_once=True,
        priority=70,
    )
