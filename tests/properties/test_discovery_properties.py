"""Property-based tests for identifiers, templates and tag resolution."""

import string

from hypothesis import given, settings
from hypothesis import strategies as st

from acdiscovery.discovery.tags import merge_tag, resolve_tag
from acdiscovery.discovery.template import render_template
from acdiscovery.errors import CircularTagAliasError
from acdiscovery.models.app import App
from acdiscovery.models.entities import ImageTags

segment = st.text(alphabet=string.ascii_lowercase + string.digits, min_size=1, max_size=8)
identifier = st.lists(segment, min_size=1, max_size=5).map("/".join)
label_name = segment.filter(lambda s: s != "name")
label_value = st.text(
    alphabet=string.ascii_letters + string.digits + ".-_",
    min_size=1,
    max_size=12,
)
labels = st.dictionaries(label_name, label_value, max_size=4)


class TestAppProperties:
    """Properties of the App model."""

    @given(name=identifier)
    def test_prefixes_shrink_outward(self, name: str) -> None:
        """Every prefix is a prefix of the previous one and the last is the host."""
        prefixes = App(name=name).name_prefixes()

        assert prefixes[0] == name
        assert prefixes[-1] == name.split("/")[0]
        assert len(prefixes) == name.count("/") + 1
        for inner, outer in zip(prefixes, prefixes[1:]):
            assert inner.startswith(outer + "/")

    @given(name=identifier, app_labels=labels)
    def test_string_form_parses_back(self, name: str, app_labels: dict[str, str]) -> None:
        """str(app) parses back into an equal app."""
        app = App(name=name, labels=app_labels)

        assert App.from_string(str(app)) == app


class TestTemplateProperties:
    """Properties of template rendering."""

    @given(app_labels=labels)
    def test_fully_rendered_when_all_keys_given(self, app_labels: dict[str, str]) -> None:
        """A template built from the given keys always resolves."""
        template = "https://example.com/" + "-".join(f"{{{k}}}" for k in app_labels)

        rendered, ok = render_template(template, *app_labels.items())

        assert ok
        for value in app_labels.values():
            assert value in rendered

    @given(app_labels=labels, missing=segment)
    def test_missing_key_unresolved(self, app_labels: dict[str, str], missing: str) -> None:
        """A placeholder with no pair is always reported unresolved."""
        pairs = [(k, v) for k, v in app_labels.items() if k != missing]

        _, ok = render_template(f"https://example.com/{{{missing}}}", *pairs)

        assert not ok


class TestTagProperties:
    """Properties of tag resolution."""

    @given(aliases=st.dictionaries(segment, segment, max_size=6), tag=segment)
    @settings(max_examples=200)
    def test_resolution_terminates(self, aliases: dict[str, str], tag: str) -> None:
        """Resolution either returns or reports a cycle; it never loops."""
        tags = ImageTags(aliases=aliases)

        try:
            resolve_tag(tags, tag)
        except CircularTagAliasError as e:
            assert e.chain[-1] in e.chain[:-1]

    @given(explicit=labels, tag_labels=labels)
    def test_explicit_labels_always_win(
        self, explicit: dict[str, str], tag_labels: dict[str, str]
    ) -> None:
        """Merged labels keep every explicit value and add the rest."""
        tags = ImageTags(labels={"t": tag_labels})

        merged = merge_tag(explicit, tags, "t")

        for key, value in explicit.items():
            assert merged[key] == value
        assert set(merged) == set(explicit) | set(tag_labels)
