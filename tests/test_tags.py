#
# PrettyRec - Tags Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, fields

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from prettyrec.errors import MalformedAnnotationError, RenderError
from prettyrec.tags import TAG_KEY, FieldTags, parse_raw_tags, parse_tags, pretty_field


# Tests ----------------------------------------------------------------------------------------------------------------

class TestParseRawTags:
    @pytest.mark.parametrize(
        "annotation, expected",
        [
            pytest.param("", {}, id="empty"),
            pytest.param("ord=1", {"ord": "1"}, id="single"),
            pytest.param("sem=title,ord=1", {"sem": "title", "ord": "1"}, id="two-keys"),
            pytest.param(" sem = title ", {" sem ": " title "}, id="whitespace-kept"),
            pytest.param("sem=title, ord=1", {"sem": "title", " ord": "1"}, id="space-after-comma"),
            pytest.param("ord=1,ord=3", {"ord": "3"}, id="last-duplicate-wins"),
            pytest.param("color=red", {"color": "red"}, id="unknown-key-kept"),
            pytest.param("ord=", {"ord": ""}, id="empty-value"),
        ],
    )
    def test_valid(self, annotation, expected):
        """Parse well-formed annotations into a key/value dict."""
        assert parse_raw_tags(annotation) == expected

    @pytest.mark.parametrize(
        "annotation",
        [
            pytest.param("ord", id="no-equals"),
            pytest.param("a=b=c", id="two-equals"),
            pytest.param("ord=1,", id="trailing-comma"),
            pytest.param(",ord=1", id="leading-comma"),
            pytest.param("sem=title,,ord=1", id="empty-element"),
            pytest.param("   ", id="whitespace-only"),
            pytest.param(" ", id="single-space"),
        ],
    )
    def test_malformed(self, annotation):
        """Reject elements that do not split into exactly one key and one value."""
        with pytest.raises(MalformedAnnotationError, match=r"(?i)expected key=value"):
            parse_raw_tags(annotation)

    @pytest.mark.parametrize(
        "annotation",
        [
            pytest.param(None, id="none"),
            pytest.param(1, id="int"),
            pytest.param(b"ord=1", id="bytes"),
        ],
    )
    def test_not_str(self, annotation):
        """Reject annotations that are not strings."""
        with pytest.raises(MalformedAnnotationError, match=r"annotation must be a str"):
            parse_raw_tags(annotation)

    def test_error_hierarchy(self):
        """Malformed annotations are caught as RenderError and ValueError."""
        with pytest.raises(RenderError):
            parse_raw_tags("ord")
        with pytest.raises(ValueError):
            parse_raw_tags("ord")


class TestParseTags:
    @pytest.mark.parametrize(
        "annotation, expected",
        [
            pytest.param("", FieldTags(), id="empty"),
            pytest.param("sem=title", FieldTags(is_title=True), id="title"),
            pytest.param("sem=title,ord=1", FieldTags(is_title=True, order_index=1), id="title-ordered"),
            pytest.param("sem=other", FieldTags(), id="sem-not-title"),
            pytest.param("ord=7", FieldTags(order_index=7), id="ordered"),
            pytest.param("ord=0", FieldTags(order_index=0), id="ord-zero"),
            pytest.param("ord=first", FieldTags(order_index=0), id="ord-not-int"),
            pytest.param("ord=1.5", FieldTags(order_index=0), id="ord-float"),
            pytest.param("ord=-3", FieldTags(order_index=0), id="ord-negative"),
            pytest.param("ord=", FieldTags(order_index=0), id="ord-empty"),
            pytest.param("color=red,ord=2", FieldTags(order_index=2), id="unknown-key-ignored"),
            pytest.param("sem =title", FieldTags(), id="key-with-space-unknown"),
            pytest.param("sem= title", FieldTags(), id="value-with-space-not-title"),
            pytest.param("ord= 2", FieldTags(order_index=2), id="ord-int-tolerates-space"),
        ],
    )
    def test_parse(self, annotation, expected):
        """Map raw keys to FieldTags, degrading unusable ord values to unordered."""
        assert parse_tags(annotation) == expected

    @pytest.mark.parametrize(
        "tags, expected",
        [
            pytest.param(FieldTags(), False, id="default"),
            pytest.param(FieldTags(order_index=0), False, id="zero"),
            pytest.param(FieldTags(order_index=1), True, id="one"),
        ],
    )
    def test_is_ordered(self, tags, expected):
        """Only a positive order_index is an explicit position."""
        assert tags.is_ordered is expected

    def test_from_raw(self):
        """Build FieldTags from an already split mapping."""
        assert FieldTags.from_raw({"sem": "title", "ord": "4"}) == FieldTags(is_title=True, order_index=4)


class TestPrettyField:
    def test_metadata(self):
        """Store the annotation under the default tag key."""

        @dataclass
        class Item:
            name: str = pretty_field("sem=title")
            size: int = pretty_field("ord=2", default=3, metadata={"unit": "kB"})

        name, size = fields(Item)
        assert name.metadata[TAG_KEY] == "sem=title"
        assert size.metadata == {"unit": "kB", TAG_KEY: "ord=2"}
        assert Item(name="a").size == 3

    def test_custom_key(self):
        """Store the annotation under a custom tag key."""

        @dataclass
        class Item:
            name: str = pretty_field("sem=title", tag_key="display", default="")

        assert fields(Item)[0].metadata == {"display": "sem=title"}

    def test_malformed_eager(self):
        """Fail at class definition on a malformed annotation."""
        with pytest.raises(MalformedAnnotationError):

            @dataclass
            class Item:
                name: str = pretty_field("sem")
