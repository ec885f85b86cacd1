"""
Test the medical fact linter rules.
"""

import re

from pharminfo.models.content import ArticleSection
from pharminfo.models.medical_facts import RULES, FactRule, MedicalFactChecker
from pharminfo.models.quality import QualitySeverity


def _rules(findings):
    return [f.rule for f in findings]


def test_finasteride_type_confusion_is_flagged():
    text = "피나스테리드는 5알파 환원효소 1형과 2형을 모두 억제해서 효과가 좋아요."
    findings = MedicalFactChecker().check_text("탈모", "프로페시아", text)

    assert _rules(findings) == ["finasteride inhibits type 1 and 2"]
    assert findings[0].severity == QualitySeverity.ERROR
    assert findings[0].context.startswith("피나스테리드")


def test_rules_only_apply_to_their_categories():
    text = "피나스테리드는 5알파 환원효소 1형과 2형을 모두 억제해요."
    assert MedicalFactChecker().check_text("감기", "판콜에이", text) == []


def test_correct_statement_is_not_flagged():
    text = "피나스테리드는 5알파 환원효소 2형만 선택적으로 억제해요."
    assert MedicalFactChecker().check_text("탈모", "프로페시아", text) == []


def test_exclusion_window_suppresses_comparison():
    """Comparing with a first-generation drug is not a classification error."""
    compared = "세티리진은 클로르페니라민 같은 1세대보다 졸음이 적어요."
    wrong = "세티리진은 졸음이 심한 1세대 항히스타민제예요."

    checker = MedicalFactChecker()

    assert checker.check_text("알레르기", "지르텍", compared) == []
    assert _rules(checker.check_text("알레르기", "지르텍", wrong)) == ["cetirizine first generation"]


def test_minoxidil_oral_warning_and_exclusions():
    checker = MedicalFactChecker()

    flagged = checker.check_text("탈모", "마이녹실액", "미녹시딜을 하루 두 번 복용해요.")
    topical = checker.check_text("탈모", "마이녹실액", "미녹시딜 외용액은 복용하지 말고 두피에 발라요.")

    assert [f.severity for f in flagged] == [QualitySeverity.WARNING]
    assert topical == []


def test_antifungal_and_acid_reducer_classes():
    checker = MedicalFactChecker()

    assert _rules(checker.check_text("무좀", "라미실크림", "테르비나핀은 아졸계 항진균제예요.")) == [
        "terbinafine azole"
    ]
    assert _rules(checker.check_text("소화제", "겔포스", "파모티딘은 PPI 계열이에요.")) == ["famotidine PPI"]
    assert _rules(checker.check_text("진통제", "아스피린", "아스피린은 COX를 가역적 억제해요.")) == [
        "aspirin reversible inhibition"
    ]


def test_each_rule_reports_at_most_once():
    text = "테르비나핀은 아졸계예요. 테르비나핀은 아졸계 약이에요."
    findings = MedicalFactChecker().check_text("무좀", "라미실크림", text)
    assert len(findings) == 1


def test_context_is_truncated():
    rule = FactRule(
        name="long match",
        pattern=re.compile(r"가{200}"),
        severity=QualitySeverity.ERROR,
        message="too long",
    )
    findings = MedicalFactChecker([rule]).check_text("무좀", "x", "가" * 300)
    assert len(findings[0].context) == 120


def test_check_spoke_reads_sections_and_faq(spoke_factory):
    article = spoke_factory("무좀", "라미실크림")
    sections = list(article.sections)
    sections[0] = ArticleSection(title=sections[0].title, content="테르비나핀은 아졸 계열이에요.")
    article = article.model_copy(update={"sections": sections})

    findings = MedicalFactChecker().check_spoke("무좀", "라미실크림", article)

    assert _rules(findings) == ["terbinafine azole"]
    assert findings[0].slug == "라미실크림"


def test_sample_articles_are_clean(store):
    checker = MedicalFactChecker()
    for category, slug, article in store.iter_spokes():
        assert checker.check_spoke(category, slug, article) == []


def test_rule_table_is_well_formed():
    names = [r.name for r in RULES]
    assert len(names) == len(set(names))
    assert all(r.categories for r in RULES)
