"""Unit tests for language resolution and Java class detection."""

import pytest

from scriptorium.core.errors import UnsupportedLanguageError
from scriptorium.execution.languages import (
    JAVA_WRAPPER_CLASS,
    get_language,
    normalize_language,
    prepare_java_source,
    supported_languages,
)


class TestNormalizeLanguage:
    """Test canonical language names and aliases."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("python", "python"),
            ("Python", "python"),
            ("py", "python"),
            ("python3", "python"),
            ("JS", "javascript"),
            ("node", "javascript"),
            ("java", "java"),
            ("c", "c"),
            ("C++", "cpp"),
            (" cpp ", "cpp"),
        ],
    )
    def test_known_languages(self, value, expected):
        assert normalize_language(value) == expected

    @pytest.mark.parametrize("value", ["ruby", "", None, "c#"])
    def test_unknown_language_rejected(self, value):
        with pytest.raises(UnsupportedLanguageError) as exc_info:
            normalize_language(value)
        assert exc_info.value.status_code == 400

    def test_supported_languages(self):
        assert supported_languages() == ["python", "javascript", "java", "c", "cpp"]

    def test_get_language_compiled_flag(self):
        assert get_language("cpp").compiled is True
        assert get_language("py").compiled is False


class TestPrepareJavaSource:
    """Test choosing the class to run for Java code."""

    def test_public_class_used_as_is(self):
        code = "public class Greeter {\n  public static void main(String[] a) { System.out.println(1); }\n}"
        class_name, source = prepare_java_source(code)
        assert class_name == "Greeter"
        assert source == code

    def test_public_final_class(self):
        class_name, _ = prepare_java_source("public final class App { public static void main(String[] a) {} }")
        assert class_name == "App"

    def test_package_private_class_with_main(self):
        code = "class Solution {\n  static void main(String[] args) {}\n}"
        class_name, source = prepare_java_source(code)
        assert class_name == "Solution"
        assert source == code

    def test_bare_statements_are_wrapped(self):
        class_name, source = prepare_java_source('System.out.println("hi");')
        assert class_name == JAVA_WRAPPER_CLASS
        assert source.startswith("public class Main {")
        assert 'System.out.println("hi");' in source
        assert "throws Exception" in source
