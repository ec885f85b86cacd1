"""
Test drug record cleaning and content building.
"""

import pytest

from pharminfo.ingestion.normalizer import (
    DEFAULT_CATEGORY,
    PLACEHOLDER_IMAGE,
    build_categories,
    build_hub,
    build_product,
    build_spoke,
    clean_html,
    convert_to_colloquial,
    deduplicate_slugs,
    detect_category,
    group_by_category,
    make_slug,
    method_word,
    process_item,
    truncate,
)


@pytest.fixture
def raw_item():
    return {
        "entpName": "한국노바티스(주)",
        "itemName": "라미실원스(테르비나핀염산염)",
        "itemSeq": 197400169,
        "efcyQesitm": "<p>이 약은 무좀, 완선, 체부백선에 사용합니다.</p>",
        "useMethodQesitm": "1일 1~2회 환부에 발라 주십시오.",
        "atpnQesitm": "눈에 들어가지 않도록 주의하십시오.",
        "intrcQesitm": "",
        "seQesitm": "발적, 가려움이 나타날 수 있습니다.",
        "depositMethodQesitm": "실온에서 보관하십시오.",
        "itemImage": "https://nedrug.mfds.go.kr/pbp/cmn/itemImageDownload/1.jpg",
    }


def test_clean_html_strips_tags_and_entities():
    assert clean_html("<p>A&amp;B&nbsp; <b>C</b></p>") == "A&B C"
    assert clean_html(None) == ""


def test_convert_to_colloquial():
    assert convert_to_colloquial("사용합니다.") == "사용해요."
    assert convert_to_colloquial("주의하십시오.") == "주의하세요."
    assert convert_to_colloquial("먹지 마십시오.") == "먹지 마세요."
    assert convert_to_colloquial("이 약은 연고입니다.") == "이 약은 연고이에요."
    assert convert_to_colloquial("보관하면 됩니다.") == "보관하면 돼요."


def test_detect_category_first_match_wins():
    assert detect_category("마이녹실액", "탈모 치료") == ("탈모약", "탈모")
    assert detect_category("라미실원스", "무좀 치료") == ("무좀약", "무좀")
    assert detect_category("카네스텐크림", "무좀 치료") == ("연고", "연고")
    assert detect_category("아무약", "효능 없음") == DEFAULT_CATEGORY


def test_make_slug_drops_parentheses_and_dosage():
    assert make_slug("라미실원스(테르비나핀염산염)") == "라미실원스"
    assert make_slug("타이레놀정 500mg") == "타이레놀정"
    assert make_slug("판토가 90캡슐") == "판토가"


def test_truncate():
    assert truncate("가나다", 5) == "가나다"
    assert truncate("가나다라마바", 3) == "가나다..."


def test_method_word():
    assert method_word("무좀", "") == "사용법"
    assert method_word("감기", "1일 3회 복용해요") == "복용법"
    assert method_word("감기", "코에 뿌리는 약이에요") == "사용법"


def test_process_item(raw_item):
    drug = process_item(raw_item)

    assert drug.id == "197400169"
    assert drug.slug == "라미실원스"
    assert drug.category_slug == "무좀"
    assert drug.manufacturer == "한국노바티스(주)"
    assert drug.description_full == "이 약은 무좀, 완선, 체부백선에 사용해요."
    assert drug.usage_full == "1일 1~2회 환부에 발라 주세요."
    assert drug.caution == "눈에 들어가지 않도록 주의하세요."
    assert drug.barkiry_query == "라미실원스"
    assert drug.has_image
    assert drug.method == "사용법"


def test_process_item_without_image(raw_item):
    raw_item["itemImage"] = None
    drug = process_item(raw_item)
    assert drug.image == PLACEHOLDER_IMAGE
    assert not drug.has_image


def test_deduplicate_slugs_numbers_repeats(raw_item):
    drugs = [process_item(raw_item) for _ in range(3)]

    assert deduplicate_slugs(drugs) == 2
    assert [d.slug for d in drugs] == ["라미실원스", "라미실원스-2", "라미실원스-3"]


def test_builders(raw_item):
    drug = process_item(raw_item)
    other = process_item(dict(raw_item, itemName="터비뉴겔", itemSeq=1))

    product = build_product(drug)
    assert product.slug == "라미실원스"
    assert product.category_slug == "무좀"

    hub = build_hub("무좀", [drug, other])
    assert hub.spoke_slugs == ["라미실원스", "터비뉴겔"]
    assert hub.spokes[0].title == "라미실원스 최저가 가격 | 성분 효과 사용법 부작용까지"

    spoke = build_spoke(drug)
    assert spoke.title == spoke.h1
    assert spoke.products == ["라미실원스"]
    assert [s.title for s in spoke.sections] == [
        "라미실원스 효능과 효과",
        "라미실원스 올바른 사용법",
        "라미실원스 부작용",
        "라미실원스 주의사항",
        "라미실원스 보관법",
    ]
    # Empty interaction text produces no FAQ entry
    assert len(spoke.faq) == 3

    grouped = group_by_category([drug, other])
    assert list(grouped) == ["무좀"]

    categories = build_categories([drug, other])
    assert [(c.slug, c.count) for c in categories] == [("무좀", 2)]
