"""
Medical fact patterns.
Known pharmacology mistakes that show up in generated Korean medicine
articles, matched per category with an exclusion window for comparison
sentences.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .content import SpokeArticle
from .quality import QualitySeverity

# Characters before / after a match searched for exclusion phrases
EXCLUDE_BEFORE = 20
EXCLUDE_AFTER = 80
CONTEXT_LENGTH = 120

FIRST_GEN_ANTIHISTAMINES = "클로르페니라민|디펜히드라민|디펜하이드라민|트리프롤리딘"
CONTRAST_WORDS = "달라|다르|아니라|아닌|과는|와는|대조|별도"


@dataclass(frozen=True)
class FactRule:
    name: str
    pattern: re.Pattern
    severity: QualitySeverity
    message: str
    categories: Sequence[str] = ()
    exclude: Optional[re.Pattern] = None

    def applies_to(self, category: str) -> bool:
        return not self.categories or category in self.categories


@dataclass
class FactFinding:
    category: str
    slug: str
    rule: str
    message: str
    context: str
    severity: QualitySeverity = QualitySeverity.ERROR


def _rule(name, pattern, message, categories, severity=QualitySeverity.ERROR, exclude=None, flags=0):
    return FactRule(
        name=name,
        pattern=re.compile(pattern, flags),
        severity=severity,
        message=message,
        categories=tuple(categories),
        exclude=re.compile(exclude) if exclude else None,
    )


RULES: List[FactRule] = [
    # 5α-reductase selectivity. Comparison sentences run longer than 25 chars.
    _rule(
        "finasteride inhibits type 1 and 2",
        r"피나스테리드[^。.\n]{0,25}1형과\s*2형[^。.\n]{0,15}(모두|동시)[^。.\n]{0,10}억제",
        '피나스테리드는 5α-환원효소 "2형만" 선택적 억제: "1형과 2형" 표현 오류',
        ["탈모"],
    ),
    _rule(
        "dutasteride type 2 selective",
        r"두타스테리드[^피나스테리드。.\n]{0,40}2형\s*선택적\s*억제",
        '두타스테리드는 1형+2형 모두 억제: "2형 선택적 억제"는 피나스테리드 표현',
        ["탈모"],
    ),
    # Antihistamine generations
    _rule(
        "cetirizine first generation",
        r"세티리진[^。.\n]{0,40}1세대",
        "세티리진은 2세대 항히스타민제 (비진정성)",
        ["감기", "두드러기", "알레르기"],
        exclude=rf"({FIRST_GEN_ANTIHISTAMINES}|히드록시진|보다)",
    ),
    _rule(
        "loratadine first generation",
        r"로라타딘[^。.]{0,40}1세대",
        "로라타딘은 2세대 항히스타민제",
        ["감기", "두드러기", "알레르기"],
    ),
    _rule(
        "fexofenadine first generation",
        r"펙소페나딘[^。.\n]{0,40}1세대",
        "펙소페나딘은 2세대 항히스타민제 (가장 비진정성)",
        ["감기", "두드러기", "알레르기"],
        exclude=rf"(테르페나딘|{FIRST_GEN_ANTIHISTAMINES}|보다)",
    ),
    _rule(
        "levocetirizine first generation",
        r"레보세티리진[^。.]{0,40}1세대",
        "레보세티리진은 2세대 항히스타민제 (세티리진 광학이성질체)",
        ["두드러기", "알레르기"],
    ),
    _rule(
        "bilastine first generation",
        r"빌라스틴[^。.]{0,40}1세대",
        "빌라스틴은 2세대 항히스타민제",
        ["두드러기", "알레르기"],
    ),
    _rule(
        "chlorpheniramine second generation",
        r"클로르페니라민[^。.]{0,40}2세대",
        "클로르페니라민은 1세대 항히스타민제 (졸음 유발)",
        ["감기", "알레르기"],
    ),
    _rule(
        "diphenhydramine second generation",
        r"디펜히드라민[^。.]{0,40}2세대",
        "디펜히드라민은 1세대 항히스타민제",
        ["감기", "알레르기"],
    ),
    _rule(
        "triprolidine second generation",
        r"트리프롤리딘[^。.]{0,40}2세대",
        "트리프롤리딘은 1세대 항히스타민제 (콘택600 성분)",
        ["감기"],
    ),
    # NSAID COX selectivity
    _rule(
        "ibuprofen COX-2 selective",
        r"이부프로펜[^。.]{0,60}COX-2\s*선택(적)?",
        "이부프로펜은 COX-1/2 비선택적 억제: COX-2 선택적 억제는 셀레콕시브",
        ["진통제", "감기", "파스"],
    ),
    _rule(
        "naproxen COX-2 selective",
        r"나프록센[^。.]{0,60}COX-2\s*선택(적)?",
        "나프록센은 COX-1/2 비선택적 NSAID",
        ["진통제"],
    ),
    _rule(
        "ketoprofen COX-2 selective",
        r"케토프로펜[^。.]{0,60}COX-2\s*선택(적)?",
        "케토프로펜은 COX-1/2 비선택적 NSAID",
        ["파스", "진통제"],
    ),
    _rule(
        "diclofenac COX-2 selective",
        r"디클로페낙[^。.]{0,60}COX-2\s*선택(적)?",
        '디클로페낙은 COX-2 상대적 우선성이 있지만 "선택적"은 오해 소지: 비선택적 NSAID로 분류',
        ["파스", "진통제"],
        severity=QualitySeverity.WARNING,
    ),
    _rule(
        "aspirin COX-2 selective",
        r"아스피린[^。.]{0,60}COX-2\s*선택(적)?",
        "아스피린은 COX-1/2 비가역적 억제 (저용량 아스피린 = COX-1 혈소판 억제)",
        ["진통제"],
    ),
    # Cough and cold ingredient classes
    _rule(
        "dextromethorphan antibiotic",
        r"덱스트로메토르판[^。.]{0,40}항생제",
        "덱스트로메토르판은 진해제(기침 억제제): 항생제가 아니에요",
        ["감기"],
    ),
    _rule(
        "pseudoephedrine antihistamine",
        r"슈도에페드린[^。.\n]{0,60}항히스타민",
        "슈도에페드린은 교감신경 자극제(비충혈 완화제): 항히스타민제가 아니에요",
        ["감기"],
        exclude=rf"({CONTRAST_WORDS}|{FIRST_GEN_ANTIHISTAMINES})",
    ),
    _rule(
        "phenylephrine antihistamine",
        r"페닐에프린[^。.\n]{0,60}항히스타민",
        "페닐에프린은 알파 교감신경 자극제(비충혈 완화제): 항히스타민제가 아니에요",
        ["감기"],
        exclude=rf"({CONTRAST_WORDS}|{FIRST_GEN_ANTIHISTAMINES})",
    ),
    _rule(
        "guaifenesin antitussive",
        r"구아이페네신[^。.\n]{0,60}진해(제|작용|효과)",
        "구아이페네신은 거담제(가래 제거): 진해제(기침 억제)가 아니에요",
        ["감기"],
        exclude=rf"({CONTRAST_WORDS})",
    ),
    # Topical minoxidil taken orally
    _rule(
        "topical minoxidil taken orally",
        r"미녹시딜[^。.\n]{0,30}(경구|복용|먹는)",
        "미녹시딜 외용액은 두피에 바르는 약: 경구 복용 지시 여부 확인 필요",
        ["탈모"],
        severity=QualitySeverity.WARNING,
        exclude=r"(미녹시딜정|경구\s*복용법|외용|도포|바르|원래|개발|고혈압|병용|피나스테리드|금지)",
    ),
    # Laxative classes
    _rule(
        "bisacodyl osmotic",
        r"비사코딜[^。.]{0,50}삼투성",
        "비사코딜은 자극성 완하제 (Dulcolax 주성분): 삼투성 완하제가 아니에요",
        ["변비"],
    ),
    _rule(
        "lactulose stimulant",
        r"락툴로스[^。.]{0,50}자극성",
        "락툴로스는 삼투성 완하제: 자극성 완하제가 아니에요",
        ["변비"],
    ),
    _rule(
        "magnesium oxide stimulant",
        r"산화마그네슘[^。.]{0,60}자극성",
        "산화마그네슘은 삼투성 완하제: 자극성 완하제가 아니에요",
        ["변비"],
    ),
    _rule(
        "senna osmotic",
        r"센나[^。.]{0,50}삼투성",
        "센나(Senna)는 자극성 완하제: 삼투성이 아니에요",
        ["변비"],
    ),
    # Antifungal classes
    _rule(
        "terbinafine azole",
        r"테르비나핀[^。.]{0,50}(아졸|azole)",
        "테르비나핀은 알릴아민계: 아졸계가 아니에요",
        ["무좀"],
        flags=re.IGNORECASE,
    ),
    _rule(
        "clotrimazole allylamine",
        r"클로트리마졸[^。.]{0,50}알릴아민",
        "클로트리마졸은 이미다졸계 아졸 항진균제: 알릴아민계가 아니에요",
        ["무좀"],
    ),
    # PPI vs H2 blockers
    _rule(
        "omeprazole H2 blocker",
        r"오메프라졸[^。.]{0,60}H2\s*(수용체|차단|억제)",
        "오메프라졸은 PPI(프로톤펌프억제제): H2 수용체 차단제가 아니에요",
        ["소화제", "제산제"],
    ),
    _rule(
        "esomeprazole H2 blocker",
        r"에소메프라졸[^。.]{0,60}H2\s*(수용체|차단|억제)",
        "에소메프라졸은 PPI: H2 차단제가 아니에요",
        ["소화제", "제산제"],
    ),
    _rule(
        "famotidine PPI",
        r"파모티딘[^。.]{0,60}(PPI|프로톤\s*펌프)",
        "파모티딘은 H2 수용체 차단제: PPI가 아니에요",
        ["소화제", "제산제"],
    ),
    _rule(
        "ranitidine PPI",
        r"라니티딘[^。.]{0,60}(PPI|프로톤\s*펌프)",
        "라니티딘은 H2 수용체 차단제: PPI가 아니에요",
        ["소화제", "제산제"],
    ),
    # Dosing
    _rule(
        "acetaminophen adult max dose",
        r"아세트아미노펜[^。.]{0,60}(하루|1일)\s*최대?\s*(3[,.]?000mg|3g)[^가-힣]{0,30}(성인|정상)",
        "아세트아미노펜 성인 최대용량은 4,000mg/일 (고령자·간질환 3,000mg): 표현 맥락 확인 필요",
        ["진통제", "감기"],
        severity=QualitySeverity.WARNING,
    ),
    _rule(
        "aspirin reversible inhibition",
        r"아스피린[^。.]{0,60}가역적\s*억제",
        "아스피린은 COX-1/2 비가역적 억제: 이부프로펜 등이 가역적 억제",
        ["진통제"],
    ),
]


class MedicalFactChecker:
    """Runs the rule table over article text."""

    def __init__(self, rules: Optional[Sequence[FactRule]] = None):
        self.rules = list(rules) if rules is not None else RULES

    def check_text(self, category: str, slug: str, text: str) -> List[FactFinding]:
        findings: List[FactFinding] = []

        for rule in self.rules:
            if not rule.applies_to(category):
                continue

            match = rule.pattern.search(text)
            if not match:
                continue

            if rule.exclude is not None:
                start = max(0, match.start() - EXCLUDE_BEFORE)
                end = min(len(text), match.end() + EXCLUDE_AFTER)
                if rule.exclude.search(text[start:end]):
                    continue

            findings.append(
                FactFinding(
                    category=category,
                    slug=slug,
                    rule=rule.name,
                    message=rule.message,
                    context=match.group(0).strip()[:CONTEXT_LENGTH],
                    severity=rule.severity,
                )
            )

        return findings

    def check_spoke(self, category: str, slug: str, article: SpokeArticle) -> List[FactFinding]:
        return self.check_text(category, slug, article.full_text())

