# backend/services/report_renderer.py
"""
AnalysisResult → 결과 화면용 데이터(ReportView) + 차트(SVG).

provider 가 준 값을 그대로 옮기기만 한다.
정렬/필터/정규화/재집계 없음 (엔티티 표도 provider 순서 그대로).
"""

from __future__ import annotations

import io
import math
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from backend.domain.models import AnalysisResult, Entity, Summary  # noqa: E402

logger = logging.getLogger(__name__)

COLORS = {
    "emerald": "#10b981",
    "indigo": "#6366f1",
    "rose": "#f43f5e",
    "amber": "#f59e0b",
    "slate": "#64748b",
}

SENTIMENT_COLORS = {
    "POSITIVE": COLORS["emerald"],
    "NEGATIVE": COLORS["rose"],
    "NEUTRAL": COLORS["amber"],
}

RING_PALETTE = [
    COLORS["emerald"],
    COLORS["indigo"],
    COLORS["amber"],
    COLORS["rose"],
    COLORS["slate"],
]

GAUGE_CIRCUMFERENCE = 282.7  # 2 * pi * r(45)


@dataclass(frozen=True)
class GaugeView:
    score: float
    label: str
    color: str
    dash_offset: float


@dataclass(frozen=True)
class RingSlice:
    type: str
    count: float
    color: str


@dataclass
class ReportView:
    language: str
    intent: str
    gauge: GaugeView
    radar: List[Tuple[str, float]]
    ring: List[RingSlice]
    bars: List[Tuple[str, float]]
    area: List[Tuple[str, float]]
    summary: Summary
    entities: List[Entity]
    insights: List[str]
    emojis: Dict[str, str] = field(default_factory=dict)


def build_gauge(result: AnalysisResult) -> GaugeView:
    score = result.sentiment.score
    label = result.sentiment.label
    return GaugeView(
        score=score,
        label=label,
        color=SENTIMENT_COLORS[label],
        dash_offset=GAUGE_CIRCUMFERENCE * (1 - score / 100),
    )


def build_report(result: AnalysisResult) -> ReportView:
    return ReportView(
        language=result.language,
        intent=result.intent,
        gauge=build_gauge(result),
        radar=[(e.label, e.score) for e in result.emotions],
        ring=[
            RingSlice(type=d.type, count=d.count, color=RING_PALETTE[i % len(RING_PALETTE)])
            for i, d in enumerate(result.entityDistribution)
        ],
        bars=[(t.label, t.relevance) for t in result.topics],
        area=[(s.segment, s.score) for s in result.sentimentProgression],
        summary=result.summary,
        entities=list(result.entities),
        insights=list(result.insights),
        emojis={e.label: e.emoji for e in result.emotions},
    )


# ---------------------------
# matplotlib 차트 (inline SVG)
# ---------------------------

def _to_svg(fig) -> str:
    buf = io.StringIO()
    fig.savefig(buf, format="svg", bbox_inches="tight", transparent=True)
    plt.close(fig)
    svg = buf.getvalue()
    # <?xml ...?> / DOCTYPE 헤더는 HTML 안에 넣을 때 필요 없음
    start = svg.find("<svg")
    return svg[start:] if start >= 0 else svg


def _gauge_chart(gauge: GaugeView):
    fig, ax = plt.subplots(figsize=(3, 3))
    # 그림 그리기 용도로만 0~100 범위로 자른다 (표시 숫자는 원래 값)
    filled = min(max(gauge.score, 0.0), 100.0)
    ax.pie(
        [filled, 100.0 - filled],
        colors=[gauge.color, "#1e293b"],
        startangle=90,
        counterclock=False,
        wedgeprops={"width": 0.12},
    )
    ax.text(0, 0.08, f"{gauge.score:g}", ha="center", va="center",
            fontsize=26, fontweight="bold", color=gauge.color)
    ax.text(0, -0.22, gauge.label, ha="center", va="center", fontsize=9, color=COLORS["slate"])
    ax.set_aspect("equal")
    return fig


def _radar_chart(radar: List[Tuple[str, float]]):
    fig = plt.figure(figsize=(4, 4))
    ax = fig.add_subplot(projection="polar")
    if radar:
        labels = [label for label, _ in radar]
        values = [score for _, score in radar]
        angles = [2 * math.pi * i / len(radar) for i in range(len(radar))]
        ax.plot(angles + angles[:1], values + values[:1], color=COLORS["indigo"])
        ax.fill(angles + angles[:1], values + values[:1], color=COLORS["indigo"], alpha=0.4)
        ax.set_xticks(angles)
        ax.set_xticklabels(labels, fontsize=8)
    ax.set_yticklabels([])
    return fig


def _ring_chart(ring: List[RingSlice]):
    fig, ax = plt.subplots(figsize=(4, 4))
    # pie 는 음수 조각을 못 그리므로 그림에서만 0 으로 (표/데이터 값은 그대로)
    sizes = [max(s.count, 0.0) for s in ring]
    if sum(sizes) > 0:
        ax.pie(
            sizes,
            labels=[s.type for s in ring],
            colors=[s.color for s in ring],
            wedgeprops={"width": 0.25},
            textprops={"fontsize": 8},
        )
    ax.set_aspect("equal")
    return fig


def _bar_chart(bars: List[Tuple[str, float]]):
    fig, ax = plt.subplots(figsize=(4, 3))
    if bars:
        labels = [label for label, _ in bars]
        values = [value for _, value in bars]
        ax.barh(range(len(bars)), values, color=COLORS["emerald"])
        ax.set_yticks(range(len(bars)))
        ax.set_yticklabels(labels, fontsize=8)
        ax.invert_yaxis()  # 첫 토픽이 위로
    ax.get_xaxis().set_visible(False)
    for side in ("top", "right", "bottom"):
        ax.spines[side].set_visible(False)
    return fig


def _area_chart(area: List[Tuple[str, float]]):
    fig, ax = plt.subplots(figsize=(7, 2.5))
    if area:
        xs = list(range(len(area)))
        ys = [score for _, score in area]
        ax.plot(xs, ys, color=COLORS["emerald"])
        ax.fill_between(xs, ys, color=COLORS["emerald"], alpha=0.3)
        ax.set_xticks(xs)
        ax.set_xticklabels([segment for segment, _ in area], fontsize=8)
    for side in ("top", "right"):
        ax.spines[side].set_visible(False)
    return fig


def render_charts(report: ReportView) -> Dict[str, str]:
    """결과 화면에 넣을 차트 5종을 SVG 문자열로 만든다."""
    charts = {
        "gauge": _to_svg(_gauge_chart(report.gauge)),
        "radar": _to_svg(_radar_chart(report.radar)),
        "ring": _to_svg(_ring_chart(report.ring)),
        "bars": _to_svg(_bar_chart(report.bars)),
        "area": _to_svg(_area_chart(report.area)),
    }
    logger.debug("차트 렌더링 완료: %s", ", ".join(charts))
    return charts
