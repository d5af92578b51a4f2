from datetime import date, datetime

from conftest import make_release

from press_room.i18n import Translator
from press_room.models import FileAsset, ImageAsset, PressKitAsset, PressRelease, SearchFilters
from press_room.views import (
    category_color,
    filters_url,
    group_assets,
    release_card,
    results_label,
    sidebar,
)

EN = Translator.for_locale("en")


def test_release_card_truncates_tags_and_uses_default_cover():
    release = make_release(
        "busy", datetime(2024, 3, 4), category="Events", tags=["a", "b", "c", "d", "e"]
    )
    card = release_card(release, EN)
    assert card.href == "/en/press/busy"
    assert card.tags == ["a", "b", "c"]
    assert card.hidden_tag_count == 2
    assert card.date_label == "March 4, 2024"
    assert card.cover_url is None
    assert (card.cover_width, card.cover_height) == (400, 300)
    assert "pink" in card.category_class


def test_release_card_cover_dimensions():
    release = PressRelease(
        title="Cover",
        slug="cover",
        publish_date=datetime(2024, 1, 1),
        summary="",
        category="Awards",
        cover_image=ImageAsset(url="//images.ctfassets.net/c.jpg", width=1200, height=800),
    )
    card = release_card(release, Translator.for_locale("fr"))
    assert card.href == "/fr/press/cover"
    assert card.cover_url == "https://images.ctfassets.net/c.jpg"
    assert (card.cover_width, card.cover_height) == (1200, 800)
    assert card.hidden_tag_count == 0


def test_unknown_category_gets_neutral_color():
    assert "gray" in category_color("Something Else")


def test_results_label():
    assert results_label(EN, 5, 5) == "Showing 5 press releases"
    assert results_label(EN, 2, 5) == "Showing 2 of 5 press releases"


def test_group_assets_uses_fixed_order_then_unknown():
    def asset(title, category):
        return PressKitAsset(title=title, category=category, file=FileAsset(url="//a/x"))

    groups = group_assets(
        [asset("extra", "Press Clippings"), asset("sheet", "Fact Sheets"), asset("logo", "Logos")],
        EN,
    )
    assert [group.category for group in groups] == ["Logos", "Fact Sheets", "Press Clippings"]
    assert groups[0].description.startswith("Primary and secondary")
    assert groups[2].title == "Press Clippings"
    assert groups[2].description == ""


def test_group_assets_cards(press_kit_assets):
    (logos,) = [group for group in group_assets(press_kit_assets, EN) if group.category == "Logos"]
    card = logos.assets[0]
    assert card.size_label == "1.2 MB"
    assert card.updated_label == "March 4, 2024"
    assert card.download_url == "https://assets.ctfassets.net/logo.zip"
    assert card.download_name == "Primary logo"


def test_asset_without_size_is_labelled_unknown():
    asset = PressKitAsset(title="t", category="Logos", file=FileAsset(url="//a/x"))
    assert group_assets([asset], EN)[0].assets[0].size_label == "N/A"


def test_filters_url_encodes_state():
    filters = SearchFilters(
        query="spa & pool",
        category="Awards",
        date_from=date(2024, 1, 1),
        tags=["Design", "Lisbon"],
    )
    assert filters_url("/en", filters, "list") == (
        "/en?q=spa+%26+pool&category=Awards&date_from=2024-01-01"
        "&tag=Design&tag=Lisbon&view=list"
    )
    assert filters_url("/en", SearchFilters()) == "/en"
    assert filters_url("/en", SearchFilters(), filters="open", all_tags="") == "/en?filters=open"


def test_sidebar_limits_and_toggles():
    tags = [f"tag{i}" for i in range(10)]
    filters = SearchFilters(category="Awards", tags=["tag1"])
    bar = sidebar("/en", filters, tags)

    assert len(bar.categories) == 5
    assert bar.hidden_category_count == 2
    assert len(bar.tags) == 8
    assert bar.hidden_tag_count == 2
    assert bar.active

    awards = bar.categories[0]
    assert awards.label == "Awards" and awards.active
    assert awards.href == "/en?tag=tag1"
    assert bar.tags[1].active
    assert bar.tags[1].href == "/en?category=Awards"
    assert bar.tags[0].href == "/en?category=Awards&tag=tag1&tag=tag0"
    assert bar.clear_href == "/en"
    assert bar.active_category.href == "/en?tag=tag1"


def test_sidebar_show_all_and_date_chip():
    filters = SearchFilters(query="spa", date_to=date(2024, 2, 1))
    bar = sidebar("/fr", filters, ["x"], show_all_categories=True, show_all_tags=True)
    assert len(bar.categories) == 7
    assert bar.hidden_category_count == 0
    assert bar.clear_dates_href == "/fr?q=spa"
    assert bar.clear_href == "/fr?q=spa"
    assert bar.active_category is None
