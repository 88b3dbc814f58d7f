from tenantcms.utils.slugify import slugify


def test_slugify_title():
    assert slugify("How to Build a REST API") == "how-to-build-a-rest-api"


def test_slugify_transliterates():
    assert slugify("Café Über") == "cafe-uber"


def test_slugify_collapses_separators():
    assert slugify("--Hello!!!   World--") == "hello-world"


def test_slugify_fallback_for_punctuation():
    assert slugify("@#$%") == "page"
    assert slugify("") == "page"


def test_slugify_truncates_without_trailing_hyphen():
    assert slugify("abc def", max_length=4) == "abc"
