"""
Per-professor analytics: topline statistics, category and question
breakdowns, a term trend, comment sentiment and data-quality notes.

Everything is recomputed from the evaluation tables on each call.
"""
from __future__ import annotations

import math
import re
import statistics
from collections import Counter, defaultdict
from datetime import date, datetime, time, timedelta

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from faculty_eval.core.scoring import ScoredRating, effective_weight, overall_score
from faculty_eval.models.category import Category
from faculty_eval.models.department import Department
from faculty_eval.models.evaluation import Evaluation
from faculty_eval.models.evaluation_response import EvaluationResponse
from faculty_eval.models.question import Question
from faculty_eval.models.user import User

POSITIVE_WORDS = ("excellent", "great", "good", "helpful", "clear", "engaging", "supportive", "organized", "outstanding", "improved")
NEGATIVE_WORDS = ("poor", "bad", "confusing", "unclear", "late", "rude", "unprepared", "boring", "inconsistent", "slow")
CONSTRUCTIVE_WORDS = ("improve", "should", "needs", "could", "suggest", "recommend", "better")
STOP_WORDS = frozenset(
    "the is and a an to of in for on with this that it as are was were be been by at or we they you i from".split()
)

TERM_ORDER = {"Spring": 1, "Summer": 2, "Fall": 3}
MAX_COMMENTS = 20
TOP_QUESTIONS = 5


def performance_label(avg: float | None) -> str:
    if avg is None:
        return "N/A"
    if avg >= 4.5:
        return "Excellent"
    if avg >= 4.0:
        return "Good"
    if avg >= 3.5:
        return "Satisfactory"
    return "Needs Improvement"


def term_of(day: date) -> tuple[str, int]:
    if 1 <= day.month <= 5:
        return "Spring", day.year
    if 6 <= day.month <= 8:
        return "Summer", day.year
    return "Fall", day.year


def analyze_comment(text: str | None) -> tuple[str, list[str]]:
    """Keyword-count sentiment plus the three most frequent non-stop words."""
    if not text:
        return "neutral", []
    t = text.lower()
    pos = sum(1 for w in POSITIVE_WORDS if w in t)
    neg = sum(1 for w in NEGATIVE_WORDS if w in t)
    cons = sum(1 for w in CONSTRUCTIVE_WORDS if w in t)

    if neg > pos and neg >= 1:
        sentiment = "negative"
    elif pos > neg and pos >= 1:
        sentiment = "positive"
    elif cons >= 1:
        sentiment = "constructive"
    else:
        sentiment = "neutral"

    tokens = [tok for tok in re.sub(r"[^a-z0-9\s]", " ", t).split() if len(tok) > 2 and tok not in STOP_WORDS]
    keywords = [k for k, _ in Counter(tokens).most_common(3)]
    return sentiment, keywords


def _stats(values: list[float]) -> dict:
    if not values:
        return {"mean": None, "median": None, "min": None, "max": None, "stddev": None}
    return {
        "mean": statistics.fmean(values),
        "median": statistics.median(values),
        "min": min(values),
        "max": max(values),
        "stddev": statistics.stdev(values) if len(values) > 1 else None,
    }


def _fmt(value: float | None) -> str:
    return f"{value:.2f}" if value is not None else "N/A"


def _load_evaluations(
    db: Session,
    professor_id: int,
    start_date: date | None,
    end_date: date | None,
    course_ids: list[int] | None,
    evaluator_role: str | None,
) -> list[Evaluation]:
    query = db.query(Evaluation).filter(Evaluation.evaluatee_id == professor_id)
    if start_date:
        query = query.filter(Evaluation.date_submitted >= datetime.combine(start_date, time.min))
    if end_date:
        query = query.filter(Evaluation.date_submitted < datetime.combine(end_date + timedelta(days=1), time.min))
    if course_ids:
        query = query.filter(Evaluation.course_id.in_(course_ids))
    if evaluator_role:
        evaluator = aliased(User)
        wanted = evaluator_role.strip().lower()
        query = query.join(evaluator, evaluator.id == Evaluation.evaluator_id).filter(
            (func.lower(evaluator.role) == wanted) | (func.lower(evaluator.user_type) == wanted)
        )
    return query.order_by(Evaluation.date_submitted.asc(), Evaluation.id.asc()).all()


def professor_analytics(
    db: Session,
    professor_id: int,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    course_ids: list[int] | None = None,
    min_responses: int = 5,
    evaluator_role: str | None = None,
) -> dict:
    prof = db.get(User, professor_id)
    if not prof:
        raise HTTPException(status_code=404, detail="Professor not found")
    department = db.get(Department, prof.department_id) if prof.department_id else None

    evaluations = _load_evaluations(db, professor_id, start_date, end_date, course_ids, evaluator_role)
    eval_ids = [e.id for e in evaluations]

    rows = []
    if eval_ids:
        rows = (
            db.query(
                EvaluationResponse.evaluation_id,
                EvaluationResponse.rating,
                Question.id.label("question_id"),
                Question.text,
                Question.weight.label("question_weight"),
                Category.id.label("category_id"),
                Category.name.label("category_name"),
                Category.weight.label("category_weight"),
            )
            .join(Question, Question.id == EvaluationResponse.question_id)
            .join(Category, Category.id == Question.category_id)
            .filter(EvaluationResponse.evaluation_id.in_(eval_ids))
            .all()
        )

    by_eval: dict[int, list] = defaultdict(list)
    by_category: dict[int, list] = defaultdict(list)
    by_question: dict[int, list] = defaultdict(list)
    for r in rows:
        by_eval[r.evaluation_id].append(r)
        by_category[r.category_id].append(r)
        by_question[r.question_id].append(r)

    # per-evaluation score: recomputed from responses, falling back to the stored score
    eval_scores: list[tuple[Evaluation, float | None, int]] = []
    for e in evaluations:
        resp = by_eval.get(e.id, [])
        score = overall_score([
            ScoredRating(r.rating, r.category_id, r.category_weight, r.question_weight) for r in resp
        ]) if resp else e.overall_score
        eval_scores.append((e, score, len(resp)))

    scores = [s for _, s, _ in eval_scores if s is not None]
    top = _stats(scores)
    n = len(evaluations)
    moe_95 = 1.96 * top["stddev"] / math.sqrt(len(scores)) if top["stddev"] is not None else None

    category_breakdown = []
    for cid, resp in sorted(by_category.items()):
        weights = [effective_weight(r.question_weight) for r in resp]
        avg = sum(r.rating * w for r, w in zip(resp, weights)) / sum(weights)
        ratings = [r.rating for r in resp]
        category_breakdown.append({
            "category_id": cid,
            "name": resp[0].category_name,
            "avg_score": avg,
            "responses": len(resp),
            "stddev": statistics.stdev(ratings) if len(ratings) > 1 else None,
            "performance_label": performance_label(avg),
            "low_sample": len(resp) < min_responses,
        })

    question_stats = []
    for qid, resp in sorted(by_question.items()):
        ratings = [r.rating for r in resp]
        count = len(ratings)
        question_stats.append({
            "question_id": qid,
            "text": resp[0].text,
            "avg_rating": statistics.fmean(ratings),
            "stddev": statistics.stdev(ratings) if count > 1 else None,
            "responses": count,
            "pct_below_3": 100.0 * sum(1 for x in ratings if x < 3) / count,
            "pct_ge_4_5": 100.0 * sum(1 for x in ratings if x >= 4.5) / count,
        })
    top_questions = sorted(question_stats, key=lambda q: q["avg_rating"], reverse=True)[:TOP_QUESTIONS]
    bottom_questions = sorted(question_stats, key=lambda q: q["avg_rating"])[:TOP_QUESTIONS]

    terms: dict[tuple[str, int], list[float]] = defaultdict(list)
    for e, score, _ in eval_scores:
        if score is not None:
            terms[term_of(e.date_submitted.date())].append(score)
    trend = [
        {"semester": f"{term} {year}", "avg_score": statistics.fmean(vals), "evaluations": len(vals)}
        for (term, year), vals in sorted(terms.items(), key=lambda kv: (kv[0][1], TERM_ORDER[kv[0][0]]))
    ]

    comments = []
    for e in sorted(evaluations, key=lambda e: e.date_submitted, reverse=True):
        if not e.comments or not e.comments.strip():
            continue
        sentiment, keywords = analyze_comment(e.comments)
        comments.append({
            "evaluation_id": e.id,
            "date_submitted": e.date_submitted.isoformat(),
            "text": e.comments,
            "sentiment": sentiment,
            "keywords": keywords,
        })
        if len(comments) >= MAX_COMMENTS:
            break

    low_sample_categories = [c["category_id"] for c in category_breakdown if c["low_sample"]]
    low_sample_questions = [q["question_id"] for q in question_stats if q["responses"] < min_responses]
    data_quality = {
        "evaluations_with_missing_responses": [e.id for e, _, cnt in eval_scores if cnt == 0],
        "questions_with_missing_weight": sorted({r.question_id for r in rows if not r.question_weight}),
        "low_sample_categories": low_sample_categories,
        "low_sample_questions": low_sample_questions,
    }

    professor = {
        "user_id": prof.id,
        "full_name": prof.full_name,
        "department": department.name if department else None,
        "course_ids": sorted({e.course_id for e in evaluations if e.course_id is not None}),
    }
    topline = {
        "evaluations_count": n,
        "overall_average": top["mean"],
        "median": top["median"],
        "min": top["min"],
        "max": top["max"],
        "stddev": top["stddev"],
        "moe_95": moe_95,
        "performance_label": performance_label(top["mean"]),
    }

    return {
        "human_summary": _summary(topline, category_breakdown, trend, min_responses, low_sample_categories, low_sample_questions, bool(rows)),
        "json_output": {
            "professor": professor,
            "topline": topline,
            "category_breakdown": category_breakdown,
            "question_stats": question_stats,
            "trend": trend,
            "top_questions": top_questions,
            "bottom_questions": bottom_questions,
            "comments": comments,
            "data_quality": data_quality,
        },
        "chart_datasets": {
            "category_bar": [{"label": c["name"], "value": c["avg_score"]} for c in category_breakdown],
            "trend_line": [{"label": t["semester"], "value": t["avg_score"]} for t in trend],
            "detailed_table": question_stats,
        },
    }


def _summary(topline, categories, trend, min_responses, low_cats, low_questions, any_responses) -> str:
    n = topline["evaluations_count"]
    sentences = [
        f"Overall average is {_fmt(topline['overall_average'])} across {n} evaluations "
        f"(min={_fmt(topline['min'])}, max={_fmt(topline['max'])}, median={_fmt(topline['median'])})."
    ]

    if len(trend) >= 2:
        last, prev = trend[-1]["avg_score"], trend[-2]["avg_score"]
        diff = last - prev
        sentences.append(
            f"The latest term average is {last:.2f}, {'up' if diff >= 0 else 'down'} {abs(diff):.2f} points from the prior term."
        )

    sampled = [c for c in categories if c["responses"] >= min_responses]
    strong = max(sampled, key=lambda c: c["avg_score"]) if sampled else None
    weak = min(sampled, key=lambda c: c["avg_score"]) if sampled else None
    fallback = categories[0]["name"] if categories else "N/A"
    sentences.append(
        f"Strongest category: {strong['name'] if strong else fallback}. Weakest category: {weak['name'] if weak else fallback}."
    )
    if weak:
        sentences.append(
            f"Focus on strengthening {weak['name']} through targeted feedback, peer observation, or revised course activities."
        )
    else:
        sentences.append("Increase response collection to improve estimate precision.")

    moe = f"95% margin of error is {_fmt(topline['moe_95'])}."
    if n < min_responses or low_cats or low_questions:
        sentences.append(
            f"Sample sizes are limited in some areas (min_responses={min_responses}); interpret results with caution. {moe}"
        )
    else:
        sentences.append(moe)

    if not any_responses:
        sentences.append("No response rows were found; metrics fall back to evaluation.overall_score.")
    return " ".join(sentences)
