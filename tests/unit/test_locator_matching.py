"""Locators evaluated against real markup, including the sample form page."""

from pathlib import Path

import pytest
from lxml import html

from browser_framework.locators import ElementLocators, resolve

SAMPLE_PAGE = Path(__file__).parents[1] / "data" / "TestData" / "SampleTestPage.html"


def matched_ids(markup, locator):
    """Ids of the elements a locator matches, in document order."""
    return [element.get("id") for element in html.fromstring(markup).xpath(locator.value)]


@pytest.fixture
def locators(mock_driver):
    return ElementLocators(mock_driver)


@pytest.fixture
def sample_page():
    with open(SAMPLE_PAGE, encoding="utf-8") as f:
        return f.read()


class TestLabelAssociation:
    LABEL_AFTER = """<form>
        <input type="radio" id="m" name="g"><label for="m">Male</label>
        <input type="radio" id="f" name="g"><label for="f">Female</label>
    </form>"""

    LABEL_BEFORE = """<form>
        <label for="m">Male</label><input type="radio" id="m" name="g">
        <label for="f">Female</label><input type="radio" id="f" name="g">
    </form>"""

    NESTED = """<form>
        <label><input type="checkbox" id="sports"> Sports</label>
        <label><input type="checkbox" id="reading"> Reading</label>
    </form>"""

    @pytest.mark.parametrize("markup", [LABEL_AFTER, LABEL_BEFORE], ids=["label-after", "label-before"])
    def test_radio_by_label_picks_its_own_radio(self, locators, markup):
        assert matched_ids(markup, locators.radio_by_label("Male")) == ["m"]
        assert matched_ids(markup, locators.radio_by_label("Female")) == ["f"]

    def test_checkbox_label_before_does_not_pick_previous_checkbox(self, locators):
        markup = """<div>
            <label for="a">Alpha</label><input type="checkbox" id="a">
            <label for="b">Beta</label><input type="checkbox" id="b">
        </div>"""

        assert matched_ids(markup, locators.checkbox_by_label("Beta")) == ["b"]

    def test_checkbox_nested_in_label(self, locators):
        assert matched_ids(self.NESTED, locators.checkbox_by_label("Reading")) == ["reading"]

    def test_unbound_neighbour_label_is_ignored(self, locators):
        markup = '<div><label>Alpha</label><input type="checkbox" id="a"></div>'
        assert matched_ids(markup, locators.checkbox_by_label("Alpha")) == []

    def test_textbox_directly_after_label(self, locators):
        markup = '<div><label>Email</label><input type="email" id="email"></div>'
        assert matched_ids(markup, locators.textbox_by_label("Email")) == ["email"]

    def test_textbox_by_label_skips_checkbox(self, locators):
        markup = '<div><label for="sub">Subscribe</label><input type="checkbox" id="sub"></div>'
        assert matched_ids(markup, locators.textbox_by_label("Subscribe")) == []

    def test_dropdown_bound_by_for(self, locators):
        markup = '<div><label for="c">Country</label><p>pick one</p><select id="c"></select></div>'
        assert matched_ids(markup, locators.dropdown_by_label("Country")) == ["c"]


class TestSameIdAcrossCategories:
    MARKUP = """<form>
        <input type="radio" id="choice" name="x">
        <input type="checkbox" id="choice">
        <input type="text" id="choice">
    </form>"""

    def test_checkbox_by_id_excludes_other_inputs(self, locators):
        elements = html.fromstring(self.MARKUP).xpath(locators.checkbox_by_id("choice").value)
        assert [e.get("type") for e in elements] == ["checkbox"]

    def test_textbox_by_id_excludes_other_inputs(self, locators):
        elements = html.fromstring(self.MARKUP).xpath(locators.textbox_by_id("choice").value)
        assert [e.get("type") for e in elements] == ["text"]


class TestSamplePage:
    @pytest.mark.parametrize(
        "factory, label, expected",
        [
            ("radio_by_label", "Male", "genderMale"),
            ("radio_by_label", "Female", "genderFemale"),
            ("checkbox_by_label", "Sports", "sports"),
            ("checkbox_by_label", "Reading", "reading"),
            ("textbox_by_label", "Email", "email"),
            ("textbox_by_label", "Last Name", "lastName"),
            ("dropdown_by_label", "Country", "country"),
            ("combobox_by_label", "City", "city"),
            ("file_input_by_label", "Profile Picture", "profilePicture"),
        ],
    )
    def test_label_lookup(self, locators, sample_page, factory, label, expected):
        assert matched_ids(sample_page, getattr(locators, factory)(label))[0] == expected

    def test_resolve_returns_first_document_match(self, locators, mock_driver, sample_page):
        """Test resolve hands back the first element the browser would report."""
        document = html.fromstring(sample_page)
        mock_driver.find_elements.side_effect = lambda by, value: document.xpath(value)

        element = resolve(mock_driver, locators.radio_by_label("Female"))

        assert element.get("value") == "female"
