"""
Tests for reference discovery in prompt text.
"""

from enhancer.core.prompts.models import ReferenceType
from enhancer.core.references import ReferenceDiscovery, discover_references


def values(refs, ref_type=None):
    return [r.value for r in refs if ref_type is None or r.type == ref_type]


class TestDiscoverReferences:
    """Test each kind of reference."""

    def test_url_trailing_punctuation_stripped(self):
        """Test that trailing punctuation is not part of a URL."""
        refs = discover_references("See https://example.com/docs/setup. Then continue")
        assert values(refs, ReferenceType.URL) == ["https://example.com/docs/setup"]

    def test_url_contents_not_rescanned(self):
        """Test that words inside URLs are not reported again."""
        refs = discover_references("read https://react.dev/learn first")
        assert values(refs) == ["https://react.dev/learn"]

    def test_project_dependency(self):
        """Test finding a project dependency by name."""
        refs = discover_references("upgrade django to the next release", ["Django", "requests"])
        assert values(refs) == ["Django"]
        assert refs[0].type == ReferenceType.LIBRARY
        assert refs[0].context == "Found in project dependencies"

    def test_short_dependency_names_ignored(self):
        """Test that very short dependency names are ignored."""
        assert discover_references("the ui is slow", ["ui"]) == []

    def test_scoped_package(self):
        """Test finding scoped npm packages."""
        refs = discover_references("install @radix-ui/react-dialog for the modal")
        scoped = [r for r in refs if r.context == "Scoped package pattern"]
        assert values(scoped) == ["@radix-ui/react-dialog"]

    def test_common_libraries(self):
        """Test finding well-known libraries in table order."""
        refs = discover_references("Write Jest tests for the React component")
        assert values(refs, ReferenceType.LIBRARY) == ["react", "jest"]

    def test_deduplicated_case_insensitively(self):
        """Test that repeated references are reported once."""
        refs = discover_references("React hooks and react context")
        assert values(refs) == ["react"]

    def test_at_reference(self):
        """Test finding @ references."""
        refs = discover_references("ping @billing about the invoice bug")
        assert values(refs, ReferenceType.PACKAGE) == ["@billing"]

    def test_agent_tokens_skipped(self):
        """Test that @agent- tokens are not references."""
        assert discover_references("ask @agent-code-reviewer to look") == []

    def test_email_is_not_a_reference(self):
        """Test that email addresses are not @ references."""
        assert discover_references("email me at dev@example.org please") == []

    def test_empty_text(self):
        assert ReferenceDiscovery(["react"]).discover("") == []
