import pytest

from page_analyzer.parser.html_parser import SeoTags, extract_seo


def test_all_fields_found():
    html = '<title>A</title><h1>B</h1><meta name="description" content="C">'
    assert extract_seo(html) == SeoTags(title="A", h1="B", description="C")


def test_fields_are_trimmed_and_first_h1_wins():
    html = """
    <html><head>
      <title>
         Spaced title
      </title>
      <META NAME="Description" CONTENT="  described  ">
    </head><body>
      <h1>  <span>First</span> heading </h1>
      <h1>Second</h1>
    </body></html>
    """
    tags = extract_seo(html)
    assert tags.title == "Spaced title"
    assert tags.h1 == "First heading"
    assert tags.description == "described"


@pytest.mark.parametrize(
    "html",
    [
        "",
        None,
        "<p>plain</p>",
        "<title>   </title><h1></h1><meta name='description' content=' '>",
        "<meta name='keywords' content='a,b'><meta property='og:description' content='x'>",
        "<meta name='description'>",
    ],
)
def test_missing_or_empty_fields_are_absent(html):
    assert extract_seo(html) == SeoTags()


def test_fields_are_independent():
    tags = extract_seo("<h1>Only heading</h1>")
    assert tags.title is None
    assert tags.h1 == "Only heading"
    assert tags.description is None


def test_malformed_markup_does_not_raise():
    html = "<html><head><title>Broken<</title><h1>Unclosed <b>bold<meta name=description content=d"
    assert isinstance(extract_seo(html), SeoTags)

