"""Tests for jigsaw.templating.knob — the template renderer."""

import logging

import pytest

from jigsaw.templating.knob import Knob, compile_source


def _components(table: dict[str, str]):
    return table.get


class TestInterpolation:
    def test_plain_text_passthrough(self) -> None:
        assert Knob("<p>static</p>").render() == "<p>static</p>"

    def test_dotted_path(self) -> None:
        knob = Knob("<h1>{{ user.name }}</h1>")
        assert knob.render({"user": {"name": "Ada"}}) == "<h1>Ada</h1>"

    def test_missing_renders_empty(self) -> None:
        assert Knob("[{{ nope }}]").render({}) == "[]"

    def test_element_leaf(self) -> None:
        knob = Knob("{{ avatar }}")
        data = {"avatar": {"tag": "img", "props": {"src": "/a.png"}}}
        assert knob.render(data) == '<img src="/a.png"/>'

    def test_link_leaf(self) -> None:
        knob = Knob("{{ gh }}")
        data = {"gh": {"type": "link", "href": "https://github.com", "text": "GitHub"}}
        assert knob.render(data) == '<a href="https://github.com">GitHub</a>'

    def test_object_renders_json(self) -> None:
        assert Knob("{{ meta }}").render({"meta": {"a": 1}}) == '{"a":1}'

    def test_tag_key_does_not_hide_other_fields(self) -> None:
        knob = Knob("{{ post.title }}|{% for p in posts %}{{ p.title }};{% endfor %}")
        data = {
            "post": {"tag": "python", "title": "Hello"},
            "posts": [{"tag": "a", "title": "One"}],
        }
        assert knob.render(data) == "Hello|One;"

    def test_link_shaped_data_keeps_extra_keys(self) -> None:
        knob = Knob("{{ nav.home }} {{ nav.home.section }}")
        data = {"nav": {"home": {"type": "link", "href": "/", "text": "Home", "section": "top"}}}
        assert knob.render(data) == '<a href="/">Home</a> top'


class TestIf:
    def test_true_branch(self) -> None:
        knob = Knob("{% if show %}yes{% else %}no{% endif %}")
        assert knob.render({"show": True}) == "yes"

    def test_false_branch(self) -> None:
        knob = Knob("{% if show %}yes{% else %}no{% endif %}")
        assert knob.render({"show": False}) == "no"

    @pytest.mark.parametrize("value", [True, False, 0, 1, "", "x", None, [], {}])
    def test_branches_are_exclusive(self, value: object) -> None:
        knob = Knob("{% if v %}A{% else %}B{% endif %}")
        assert knob.render({"v": value}) in ("A", "B")

    def test_without_else_renders_nothing_when_false(self) -> None:
        assert Knob("a{% if x %}b{% endif %}c").render({}) == "ac"

    def test_bio_present(self) -> None:
        knob = Knob("<div>{% if bio %}<p>{{bio}}</p>{% endif %}</div>")
        assert knob.render({"bio": "hi"}) == "<div><p>hi</p></div>"

    def test_bio_absent(self) -> None:
        knob = Knob("<div>{% if bio %}<p>{{bio}}</p>{% endif %}</div>")
        assert knob.render({}) == "<div></div>"

    def test_nested_if(self) -> None:
        knob = Knob("{% if a %}[{% if b %}ab{% else %}a{% endif %}]{% else %}-{% endif %}")
        assert knob.render({"a": 1, "b": 1}) == "[ab]"
        assert knob.render({"a": 1}) == "[a]"
        assert knob.render({}) == "-"

    def test_empty_list_is_truthy(self) -> None:
        assert Knob("{% if xs %}y{% else %}n{% endif %}").render({"xs": []}) == "y"

    def test_collapsible_branch_with_empty_content(self) -> None:
        knob = Knob("{% if user %}<span>{{ user.nick }}</span>{% endif %}")
        assert knob.render({"user": {"name": "Ada"}}) == ""

    def test_non_collapsible_branch_kept(self) -> None:
        knob = Knob("{% if user %}Hi <span>{{ user.nick }}</span>{% endif %}")
        assert knob.render({"user": {"name": "Ada"}}) == "Hi <span></span>"

    @pytest.mark.parametrize("show", [True, False])
    def test_unclosed_if_renders_nothing_for_block(self, show: bool) -> None:
        knob = Knob("a{% if show %}<b>hidden {{ pw }}</b>")
        assert knob.render({"show": show, "pw": "hunter2"}) == "a"

    def test_unclosed_inner_block_stays_inside_outer(self) -> None:
        knob = Knob("<p>{% if a %}x{% for i in xs %}y{% endif %}</p>")
        assert knob.render({"a": True, "xs": [1]}) == "<p>x</p>"

    def test_stray_tags_render_nothing(self) -> None:
        assert Knob("a{% endif %}b{% else %}c{% wat %}d").render({}) == "abcd"


class TestFor:
    def test_projects(self) -> None:
        knob = Knob("{% for p in projects %}<li>{{p.name}}</li>{% endfor %}")
        data = {"projects": [{"name": "A"}, {"name": "B"}]}
        assert knob.render(data) == "<li>A</li><li>B</li>"

    @pytest.mark.parametrize("count", [0, 1, 3, 7])
    def test_one_rendering_per_item(self, count: int) -> None:
        knob = Knob("{% for x in xs %}[{{ x }}]{% endfor %}")
        out = knob.render({"xs": list(range(count))})
        assert out == "".join(f"[{i}]" for i in range(count))

    def test_loop_helpers(self) -> None:
        knob = Knob(
            "{% for x in xs %}{{ x_index }}"
            "{% if x_first %}F{% endif %}{% if x_last %}L{% endif %};{% endfor %}"
        )
        assert knob.render({"xs": ["a", "b", "c"]}) == "0F;1;2L;"

    def test_outer_context_visible(self) -> None:
        knob = Knob("{% for x in xs %}{{ sep }}{{ x }}{% endfor %}")
        assert knob.render({"xs": [1, 2], "sep": "-"}) == "-1-2"

    def test_mapping_iterates_key_value(self) -> None:
        knob = Knob("{% for e in env %}{{ e.key }}={{ e.value }};{% endfor %}")
        assert knob.render({"env": {"a": 1, "b": 2}}) == "a=1;b=2;"

    def test_non_sequence_renders_nothing(self) -> None:
        knob = Knob("<ul>{% for x in xs %}<li>{{ x }}</li>{% endfor %}</ul>")
        assert knob.render({"xs": "abc"}) == "<ul></ul>"
        assert knob.render({}) == "<ul></ul>"

    def test_nested_loops(self) -> None:
        knob = Knob(
            "{% for row in rows %}<tr>{% for c in row.cells %}<td>{{ c }}</td>{% endfor %}</tr>{% endfor %}"
        )
        data = {"rows": [{"cells": [1, 2]}, {"cells": [3]}]}
        assert knob.render(data) == "<tr><td>1</td><td>2</td></tr><tr><td>3</td></tr>"

    def test_malformed_header_renders_nothing(self) -> None:
        assert Knob("a{% for xs %}b{% endfor %}c").render({"xs": [1]}) == "ac"


class TestComponents:
    def test_include_with_scoped_context(self) -> None:
        knob = Knob("<nav>{{{ nav }}}</nav>", components=_components({"nav": "{{ title }}"}))
        assert knob.render({"nav": {"title": "Home"}}) == "<nav>Home</nav>"

    def test_component_sees_only_its_own_scope(self) -> None:
        knob = Knob("{{{ card }}}", components=_components({"card": "[{{ title }}]"}))
        assert knob.render({"title": "outer"}) == "[]"

    def test_round_trip_matches_direct_render(self) -> None:
        body = "<h2>{{ name }}</h2>{% for t in tags %}<i>{{ t }}</i>{% endfor %}"
        data = {"card": {"name": "Ada", "tags": ["x", "y"]}}
        included = Knob("{{{ card }}}", components=_components({"card": body})).render(data)
        assert included == Knob(body).render(data["card"])

    def test_missing_component_renders_empty(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="jigsaw.templating"):
            out = Knob("a{{{ ghost }}}b", components=_components({})).render({})
        assert out == "ab"
        assert "ghost" in caplog.text

    def test_no_component_table(self) -> None:
        assert Knob("{{{ ghost }}}").render({}) == ""

    def test_leaf_value_renders_in_place(self) -> None:
        knob = Knob("{{{ logo }}}", components=_components({}))
        data = {"logo": {"tag": "img", "props": {"src": "/logo.svg"}}}
        assert knob.render(data) == '<img src="/logo.svg"/>'

    def test_registered_component_wins_over_leaf_data(self) -> None:
        knob = Knob("{{{ card }}}", components=_components({"card": "<div>{{ title }}</div>"}))
        assert knob.render({"card": {"tag": "featured", "title": "T"}}) == "<div>T</div>"

    def test_round_trip_with_leaf_shaped_data(self) -> None:
        body = "<h2>{{ title }}</h2><i>{{ tag }}</i>"
        data = {"card": {"tag": "featured", "title": "T"}}
        included = Knob("{{{ card }}}", components=_components({"card": body})).render(data)
        assert included == Knob(body).render(data["card"]) == "<h2>T</h2><i>featured</i>"

    def test_nested_components(self) -> None:
        table = {"page": "<main>{{{ card }}}</main>", "card": "<b>{{ name }}</b>"}
        knob = Knob("{{{ page }}}", components=_components(table))
        assert knob.render({"page": {"card": {"name": "Ada"}}}) == "<main><b>Ada</b></main>"

    def test_self_inclusion_left_unexpanded(self, caplog: pytest.LogCaptureFixture) -> None:
        table = {"loop": "x{{{ loop }}}"}
        knob = Knob("{{{ loop }}}", components=_components(table))
        with caplog.at_level(logging.WARNING, logger="jigsaw.templating"):
            out = knob.render({"loop": {"loop": {}}})
        assert out == "x{{{ loop }}}"
        assert "includes itself" in caplog.text

    def test_component_change_seen_without_recompile(self) -> None:
        table = {"nav": "v1"}
        knob = Knob("{{{ nav }}}", components=_components(table))
        assert knob.render() == "v1"
        table["nav"] = "v2"
        assert knob.render() == "v2"


class TestCompileSource:
    def test_memoized(self) -> None:
        assert compile_source("<p>{{ a }}</p>") is compile_source("<p>{{ a }}</p>")
