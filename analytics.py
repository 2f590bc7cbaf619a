"""Core analytics for a ChatGPT "wrapped" style usage report.

Derives overview totals, time patterns, topics, categories, personality,
achievements, mood, streaks and narrative facts from normalized
conversations.  Used by both the CLI (wrapped_summary.py) and the local
API (app.py).
"""

from __future__ import annotations

import csv
import json
import logging
import math
import os
from datetime import date, datetime
from typing import Any, Callable

from conversation_models import AnalyticsResult, ParsedConversation
from export_parser import (
    EmptyResultError,
    ValidationError,
    decode_export,
    load_export,
    parse_conversations,
    validate_export,
)
from reference_data import (
    ACHIEVEMENTS,
    ARCHETYPES,
    CATEGORY_COLORS,
    CATEGORY_ICONS,
    CATEGORY_KEYWORDS,
    CATEGORY_NAME_KEYS,
    DAY_KEYS,
    DAY_NAMES,
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_CATEGORY_ICON,
    GENERAL_CATEGORY,
    MODEL_DISPLAY_NAMES,
    MOOD_FALLBACK,
    MOOD_LABELS,
    PEAK_PERIOD_KEYS,
    TOPIC_COLORS,
    TRAIT_COLORS,
)
from settings import (
    CATEGORY_MESSAGE_CHARS,
    CATEGORY_USER_MESSAGES,
    EVOLUTION_CHUNKS,
    EVOLUTION_MESSAGE_CHARS,
    EVOLUTION_USER_MESSAGES,
    MAX_EVOLUTION_TOPICS,
    MAX_TOPIC_TEXTS,
    MAX_WORD_CLOUD_TEXTS,
    PREVIEW_CHARS,
)
from text_features import (
    Tagger,
    analyze_sentiment,
    categorize_conversation,
    extract_topics,
    extract_word_frequencies,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Small helpers
# ---------------------------------------------------------------------------

def _round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def _month_label(moment: datetime) -> str:
    return moment.strftime("%b %Y")


def _sunday_first_weekday(moment: datetime) -> int:
    """Weekday index with 0 = Sunday, 6 = Saturday."""
    return (moment.weekday() + 1) % 7


def _user_texts(conversations: list[ParsedConversation]) -> list[str]:
    return [m.content for c in conversations for m in c.user_messages()]


def _category_percentage(categories: list[dict], name: str) -> int:
    for category in categories:
        if category["name"] == name:
            return category["percentage"]
    return 0


# ---------------------------------------------------------------------------
# Overview & time patterns
# ---------------------------------------------------------------------------

def compute_overview(conversations: list[ParsedConversation]) -> dict[str, Any]:
    """Compute headline totals and averages.

    Args:
        conversations: Parsed conversations, already sorted ascending by
            creation time (first/last are taken by position).

    Returns:
        Dict with keys total_conversations, total_messages,
        total_user_messages, total_assistant_messages, total_words,
        total_user_words, avg_conversation_length, avg_words_per_message,
        longest_conversation, shortest_conversation, first_conversation,
        last_conversation (each a dict with title plus message_count or
        an ISO date), total_days_active and avg_conversations_per_day.
    """
    total = len(conversations)
    total_messages = sum(c.message_count for c in conversations)
    total_words = sum(c.word_count for c in conversations)

    by_length = sorted(conversations, key=lambda c: c.message_count, reverse=True)
    longest = by_length[0] if by_length else None
    shortest = by_length[-1] if by_length else None
    first = conversations[0] if conversations else None
    last = conversations[-1] if conversations else None

    if first is not None and last is not None:
        total_days_active = (last.created_at - first.created_at).days + 1
    else:
        total_days_active = 1

    now = datetime.now().isoformat()
    return {
        "total_conversations": total,
        "total_messages": total_messages,
        "total_user_messages": sum(c.user_message_count for c in conversations),
        "total_assistant_messages": sum(c.assistant_message_count for c in conversations),
        "total_words": total_words,
        "total_user_words": sum(c.user_word_count for c in conversations),
        "avg_conversation_length": _round_half_up(total_messages / max(total, 1)),
        "avg_words_per_message": _round_half_up(total_words / max(total_messages, 1)),
        "longest_conversation": {
            "title": longest.title if longest else "N/A",
            "message_count": longest.message_count if longest else 0,
        },
        "shortest_conversation": {
            "title": shortest.title if shortest else "N/A",
            "message_count": shortest.message_count if shortest else 0,
        },
        "first_conversation": {
            "title": first.title if first else "N/A",
            "date": first.created_at.isoformat() if first else now,
        },
        "last_conversation": {
            "title": last.title if last else "N/A",
            "date": last.created_at.isoformat() if last else now,
        },
        "total_days_active": total_days_active,
        "avg_conversations_per_day": round(total / max(total_days_active, 1), 1),
    }


def _month_range(start: datetime, end: datetime) -> list[str]:
    """Labels for every calendar month from *start* to *end* inclusive."""
    labels = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        labels.append(_month_label(datetime(year, month, 1)))
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return labels


def _peak_period(hour: int) -> str:
    if 5 <= hour < 12:
        return "Morning"
    if 12 <= hour < 17:
        return "Afternoon"
    if 17 <= hour < 21:
        return "Evening"
    return "Night"


def compute_time_patterns(conversations: list[ParsedConversation]) -> dict[str, Any]:
    """Bucket conversation start times by hour, weekday and month.

    One increment per conversation, using its local creation time.

    Args:
        conversations: Parsed conversations sorted by creation time.

    Returns:
        Dict with keys:
            - hourly_distribution: list of 24 ints.
            - daily_distribution: list of 7 ints, index 0 is Sunday.
            - monthly_distribution: list of {month, count} dicts covering
              every month from the first to the last conversation.
            - busiest_hour, busiest_day, busiest_day_key, busiest_month.
            - is_night_owl: night (22:00-05:59) activity exceeds 40% of
              daytime (06:00-21:59) activity.
            - peak_period, peak_period_key.
            - weekday_vs_weekend: {weekday, weekend} totals.
    """
    hourly = [0] * 24
    daily = [0] * 7
    monthly_counts: dict[str, int] = {}

    for conv in conversations:
        moment = conv.created_at
        hourly[moment.hour] += 1
        daily[_sunday_first_weekday(moment)] += 1
        label = _month_label(moment)
        monthly_counts[label] = monthly_counts.get(label, 0) + 1

    monthly_distribution = []
    if conversations:
        months = _month_range(conversations[0].created_at, conversations[-1].created_at)
        monthly_distribution = [
            {"month": m, "count": monthly_counts.get(m, 0)} for m in months
        ]

    busiest_hour = hourly.index(max(hourly))
    busiest_day_index = daily.index(max(daily))
    busiest_month = {"month": "N/A", "count": 0}
    for entry in monthly_distribution:
        if entry["count"] > busiest_month["count"]:
            busiest_month = entry

    night = sum(hourly[22:]) + sum(hourly[:6])
    day = sum(hourly[6:22])
    peak_period = _peak_period(busiest_hour)

    return {
        "hourly_distribution": hourly,
        "daily_distribution": daily,
        "monthly_distribution": monthly_distribution,
        "busiest_hour": busiest_hour,
        "busiest_day": DAY_NAMES[busiest_day_index],
        "busiest_day_key": DAY_KEYS[busiest_day_index],
        "busiest_month": busiest_month["month"],
        "is_night_owl": night > day * 0.4,
        "peak_period": peak_period,
        "peak_period_key": PEAK_PERIOD_KEYS.get(peak_period, "morning"),
        "weekday_vs_weekend": {
            "weekday": sum(daily[1:6]),
            "weekend": daily[0] + daily[6],
        },
    }


# ---------------------------------------------------------------------------
# Topics, categories, models
# ---------------------------------------------------------------------------

def compute_top_topics(
    texts: list[str],
    tagger: Tagger | None = None,
    stop_words: frozenset[str] | None = None,
) -> list[dict]:
    """Rank topics and attach share-of-top-topics percentages and colors.

    Percentages are relative to the sum of the returned counts, not the
    whole corpus.
    """
    raw = extract_topics(texts, tagger=tagger, stop_words=stop_words)
    total = sum(t["count"] for t in raw)
    return [
        {
            "topic": t["topic"],
            "count": t["count"],
            "percentage": _round_half_up(t["count"] / max(total, 1) * 100),
            "color": TOPIC_COLORS[i % len(TOPIC_COLORS)],
        }
        for i, t in enumerate(raw)
    ]


def _category_text(conv: ParsedConversation) -> str:
    snippets = [
        m.content[:CATEGORY_MESSAGE_CHARS]
        for m in conv.user_messages()[:CATEGORY_USER_MESSAGES]
    ]
    return conv.title + " " + " ".join(snippets)


def compute_categories(conversations: list[ParsedConversation]) -> list[dict]:
    """Categorize every conversation and aggregate the results.

    Returns:
        List of dicts (name, name_key, count, percentage, icon, color),
        sorted descending by count.  Percentages are of the total
        conversation count.
    """
    counts: dict[str, int] = {}
    for conv in conversations:
        category = categorize_conversation(_category_text(conv))
        counts[category] = counts.get(category, 0) + 1

    total = len(conversations)
    rows = [
        {
            "name": name,
            "name_key": CATEGORY_NAME_KEYS.get(name, "general"),
            "count": count,
            "percentage": _round_half_up(count / total * 100),
            "icon": CATEGORY_ICONS.get(name, DEFAULT_CATEGORY_ICON),
            "color": CATEGORY_COLORS.get(name, DEFAULT_CATEGORY_COLOR),
        }
        for name, count in counts.items()
    ]
    return sorted(rows, key=lambda r: r["count"], reverse=True)


def format_model_name(slug: str) -> str:
    """Map a model slug to a display name.

    The first table key contained in *slug* wins; unknown slugs are
    upper-cased verbatim.
    """
    for key, display in MODEL_DISPLAY_NAMES.items():
        if key in slug:
            return display
    return slug.upper()


def compute_model_usage(conversations: list[ParsedConversation]) -> list[dict]:
    """Count conversations per prettified model name, most used first."""
    counts: dict[str, int] = {}
    for conv in conversations:
        model = format_model_name(conv.model)
        counts[model] = counts.get(model, 0) + 1

    total = len(conversations)
    rows = [
        {"model": model, "count": count, "percentage": _round_half_up(count / total * 100)}
        for model, count in counts.items()
    ]
    return sorted(rows, key=lambda r: r["count"], reverse=True)


# ---------------------------------------------------------------------------
# Personality & achievements
# ---------------------------------------------------------------------------

def _determine_archetype(
    top_category: str,
    is_night_owl: bool,
    verbosity: int,
    curiosity: int,
    technical: int,
    creativity: int,
    total_conversations: int,
) -> str:
    """Pick an archetype key; the first matching rule wins."""
    if technical > 30 and is_night_owl:
        return "midnight_coder"
    if curiosity > 80 and total_conversations > 200:
        return "curious_explorer"
    if creativity > 25:
        return "creative_genius"
    if technical > 20:
        return "code_wizard"
    if verbosity > 70:
        return "deep_thinker"
    if top_category == "Business & Career":
        return "hustler"
    if top_category == "Learning & Education":
        return "eternal_student"
    return "ai_whisperer"


def compute_personality(
    conversations: list[ParsedConversation],
    categories: list[dict],
    time_patterns: dict[str, Any],
) -> dict[str, Any]:
    """Score six 0-100 traits and choose an archetype.

    Args:
        conversations: Parsed conversations.
        categories: Output of ``compute_categories`` (sorted by count).
        time_patterns: Output of ``compute_time_patterns``.

    Returns:
        Dict with keys archetype, archetype_key, archetype_emoji,
        archetype_description, fun_title, traits (list of name,
        name_key, score, color), conversation_style and style_key.
    """
    total = len(conversations)
    top_category = categories[0]["name"] if categories else GENERAL_CATEGORY
    avg_user_words = sum(c.user_word_count for c in conversations) / max(total, 1)

    curiosity = min(100, _round_half_up(total / 100 * 60 + 40))
    verbosity = min(100, _round_half_up(avg_user_words / 200 * 100))
    diversity = min(100, _round_half_up(len(categories) / len(CATEGORY_KEYWORDS) * 100))
    consistency = min(100, _round_half_up(50 + total * 0.3))
    creativity = _category_percentage(categories, "Creative Writing")
    technical = _category_percentage(categories, "Coding & Development")

    archetype_key = _determine_archetype(
        top_category,
        time_patterns["is_night_owl"],
        verbosity,
        curiosity,
        technical,
        creativity,
        total,
    )
    archetype = ARCHETYPES[archetype_key]

    scores = (
        ("Curiosity", curiosity),
        ("Verbosity", verbosity),
        ("Diversity", diversity),
        ("Consistency", consistency),
        ("Creativity", max(20, creativity * 3)),
        ("Technical", max(20, technical * 3)),
    )
    traits = [
        {"name": name, "name_key": name.lower(), "score": score, "color": TRAIT_COLORS[name.lower()]}
        for name, score in scores
    ]

    detailed = verbosity > 60
    return {
        "archetype": archetype["archetype"],
        "archetype_key": archetype_key,
        "archetype_emoji": archetype["emoji"],
        "archetype_description": archetype["description"],
        "fun_title": archetype["fun_title"],
        "traits": traits,
        "conversation_style": (
            "You tend to give detailed context in your conversations"
            if detailed
            else "You prefer getting straight to the point"
        ),
        "style_key": "detailed" if detailed else "concise",
    }


def _achievement_metrics(
    overview: dict[str, Any],
    time_patterns: dict[str, Any],
    categories: list[dict],
) -> dict[str, Any]:
    split = time_patterns["weekday_vs_weekend"]
    return {
        "total_conversations": overview["total_conversations"],
        "is_night_owl": time_patterns["is_night_owl"],
        "busiest_hour": time_patterns["busiest_hour"],
        "total_user_words": overview["total_user_words"],
        "category_count": len(categories),
        "longest_conversation_messages": overview["longest_conversation"]["message_count"],
        "avg_conversations_per_day": overview["avg_conversations_per_day"],
        "coding_percentage": _category_percentage(categories, "Coding & Development"),
        "creative_percentage": _category_percentage(categories, "Creative Writing"),
        "weekend_excess": split["weekend"] - split["weekday"] * 0.5,
        "total_days_active": overview["total_days_active"],
    }


def compute_achievements(
    overview: dict[str, Any],
    time_patterns: dict[str, Any],
    categories: list[dict],
) -> list[dict]:
    """Evaluate every badge; locked badges are reported too."""
    metrics = _achievement_metrics(overview, time_patterns, categories)
    return [
        {
            "id": badge["id"],
            "title": badge["title"],
            "description": badge["description"],
            "icon": badge["icon"],
            "unlocked": bool(badge["op"](metrics[badge["metric"]], badge["threshold"])),
            "rarity": badge["rarity"],
            "color": badge["color"],
        }
        for badge in ACHIEVEMENTS
    ]


# ---------------------------------------------------------------------------
# Mood & evolution
# ---------------------------------------------------------------------------

def mood_label(sentiment: float) -> tuple[str, str]:
    """Return (label, label_key) for an average sentiment score."""
    for lower_bound, label, key in MOOD_LABELS:
        if sentiment > lower_bound:
            return label, key
    return MOOD_FALLBACK


def compute_mood_journey(conversations: list[ParsedConversation]) -> list[dict]:
    """Average per-conversation sentiment by calendar month.

    Returns:
        List of dicts (date, sentiment, label, label_key) in the order
        months first appear.
    """
    monthly: dict[str, list[float]] = {}
    for conv in conversations:
        text = " ".join(m.content for m in conv.user_messages())
        monthly.setdefault(_month_label(conv.created_at), []).append(analyze_sentiment(text))

    journey = []
    for month, scores in monthly.items():
        avg = sum(scores) / len(scores)
        label, key = mood_label(avg)
        journey.append({"date": month, "sentiment": round(avg, 2), "label": label, "label_key": key})
    return journey


def compute_evolution(
    conversations: list[ParsedConversation],
    tagger: Tagger | None = None,
    stop_words: frozenset[str] | None = None,
) -> list[dict]:
    """Top topics for up to six equal chronological slices.

    Returns:
        List of dicts (period, topics, message_count).  A slice without
        recurring topics reports ``["general chat"]``.
    """
    chunk_size = max(1, math.ceil(len(conversations) / EVOLUTION_CHUNKS))
    evolution = []
    for start in range(0, len(conversations), chunk_size):
        chunk = conversations[start:start + chunk_size]
        period = f"{_month_label(chunk[0].created_at)} - {_month_label(chunk[-1].created_at)}"

        texts: list[str] = []
        for conv in chunk:
            texts.append(conv.title)
            texts.extend(
                m.content[:EVOLUTION_MESSAGE_CHARS]
                for m in conv.user_messages()[:EVOLUTION_USER_MESSAGES]
            )
        topics = extract_topics(
            texts, MAX_EVOLUTION_TOPICS, tagger=tagger, stop_words=stop_words,
        )

        evolution.append({
            "period": period,
            "topics": [t["topic"] for t in topics] or ["general chat"],
            "message_count": sum(c.message_count for c in chunk),
        })
    return evolution


# ---------------------------------------------------------------------------
# Power metrics
# ---------------------------------------------------------------------------

def compute_streaks(dates: list[date]) -> tuple[int, int]:
    """Longest and current run of consecutive calendar days.

    Args:
        dates: Active dates; duplicates and order do not matter.

    Returns:
        (longest_streak, current_streak).  The current streak is the run
        ending at the latest date.  Both are 1 for empty input.
    """
    ordered = sorted(set(dates))
    longest = 1
    current = 1
    for prev, curr in zip(ordered, ordered[1:]):
        if (curr - prev).days == 1:
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return longest, current


def compute_power_metrics(
    conversations: list[ParsedConversation],
    overview: dict[str, Any],
) -> dict[str, Any]:
    """Streaks, busiest day, question/code counts and fun scores.

    Returns:
        Dict with keys longest_streak, current_streak, most_active_day
        ({date, count}), average_response_time, questions_asked,
        code_blocks_generated, friendship_score, total_characters and
        books_equivalent.
    """
    day_counts: dict[str, int] = {}
    for conv in conversations:
        key = conv.created_at.date().isoformat()
        day_counts[key] = day_counts.get(key, 0) + 1

    longest, current = compute_streaks([c.created_at.date() for c in conversations])

    most_active = {"date": "N/A", "count": 0}
    for day, count in day_counts.items():
        if count > most_active["count"]:
            most_active = {"date": day, "count": count}

    questions = 0
    code_blocks = 0
    total_chars = 0
    for conv in conversations:
        for msg in conv.messages:
            total_chars += len(msg.content)
            if msg.role == "user" and "?" in msg.content:
                questions += 1
            if msg.role == "assistant":
                code_blocks += msg.content.count("```") // 2

    friendship = min(100, _round_half_up(
        len(conversations) * 0.05
        + overview["total_days_active"] * 0.1
        + questions * 0.02
        + 20
    ))

    return {
        "longest_streak": longest,
        "current_streak": current,
        "most_active_day": most_active,
        "average_response_time": "Instant ⚡",
        "questions_asked": questions,
        "code_blocks_generated": code_blocks,
        "friendship_score": friendship,
        "total_characters": total_chars,
        "books_equivalent": round(overview["total_words"] / 50000, 1),
    }


# ---------------------------------------------------------------------------
# Narrative sections
# ---------------------------------------------------------------------------

def compute_fun_facts(
    overview: dict[str, Any],
    time_patterns: dict[str, Any],
    personality: dict[str, Any],
    power_metrics: dict[str, Any],
) -> list[dict]:
    """Ten templated facts, each with the params that fed the text."""
    words = f"{overview['total_words']:,}"
    books = power_metrics["books_equivalent"]
    hour = time_patterns["busiest_hour"]
    night_owl = time_patterns["is_night_owl"]
    day = time_patterns["busiest_day"]
    questions = f"{power_metrics['questions_asked']:,}"
    code_blocks = power_metrics["code_blocks_generated"]
    longest = overview["longest_conversation"]
    summary = personality["archetype_description"].split(".")[0]
    score = power_metrics["friendship_score"]

    return [
        {
            "emoji": "📚",
            "text": f"Your conversations contain {words} words, that's equivalent to {books} books!",
            "key": "wordsFact",
            "params": {"words": words, "books": books},
        },
        {
            "emoji": "⏰",
            "text": (
                f"Your peak ChatGPT hour is {hour}:00. "
                + ("You're a true night owl!" if night_owl else "You keep regular hours!")
            ),
            "key": "peakHourFact",
            "params": {"hour": hour, "nightOwl": "nightOwlYes" if night_owl else "nightOwlNo"},
        },
        {
            "emoji": "📅",
            "text": f"{day} is your ChatGPT day, you chat the most on {day}s!",
            "key": "busiestDayFact",
            "params": {"day": day, "dayKey": time_patterns["busiest_day_key"]},
        },
        {
            "emoji": "🔥",
            "text": f"Your longest streak was {power_metrics['longest_streak']} consecutive days of chatting!",
            "key": "streakFact",
            "params": {"streak": power_metrics["longest_streak"]},
        },
        {
            "emoji": "❓",
            "text": (
                f"You've asked approximately {questions} questions. "
                "Curiosity definitely isn't killing this cat!"
            ),
            "key": "questionsFact",
            "params": {"count": questions},
        },
        {
            "emoji": "💻",
            "text": (
                f"ChatGPT generated {code_blocks:,} code blocks for you!"
                if code_blocks > 0
                else "You haven't needed much code from ChatGPT, a true self-coder!"
            ),
            "key": "codeYesFact" if code_blocks > 0 else "codeNoFact",
            "params": {"count": f"{code_blocks:,}"},
        },
        {
            "emoji": "💬",
            "text": (
                f"Your longest conversation had {longest['message_count']} messages: "
                f"\"{longest['title']}\""
            ),
            "key": "longestConvoFact",
            "params": {"count": longest["message_count"], "title": longest["title"]},
        },
        {
            "emoji": "🎭",
            "text": f"Your AI personality type is \"{personality['archetype']}\": {summary}.",
            "key": "personalityFact",
            "params": {"archetype": personality["archetype"], "description": summary},
        },
        {
            "emoji": "📊",
            "text": (
                f"You average {overview['avg_conversations_per_day']} conversations per day "
                f"across {overview['total_days_active']} days!"
            ),
            "key": "avgPerDayFact",
            "params": {
                "avg": overview["avg_conversations_per_day"],
                "days": overview["total_days_active"],
            },
        },
        {
            "emoji": "💕",
            "text": (
                f"Your AI Friendship Score is {score}/100. "
                + ("You and ChatGPT are besties!" if score > 70 else "Your friendship is growing!")
            ),
            "key": "friendshipFact",
            "params": {
                "score": score,
                "message": "friendshipBesties" if score > 70 else "friendshipGrowing",
            },
        },
    ]


def compute_predictions(
    topics: list[dict],
    categories: list[dict],
    personality: dict[str, Any],
) -> list[str]:
    """Five playful predictions built from the top topic, category and traits."""
    top_topic = topics[0]["topic"] if topics else "various topics"
    top_category = categories[0]["name"] if categories else GENERAL_CATEGORY
    traits = personality["traits"]
    outlook = "an even more curious" if traits[0]["score"] > 70 else "a steadily growing"
    next_trait = next((t["name"] for t in traits if t["score"] < 50), "Mastery")

    return [
        f"Based on your patterns, you'll probably ask about \"{top_topic}\" again this week 🎯",
        f"Your next big exploration will likely be in {top_category}, it's your comfort zone!",
        f"You're on track to have {outlook} year with AI",
        f"We predict you'll unlock the \"{next_trait}\" trait next, keep exploring!",
        "Your conversation style suggests you'll become even more efficient with AI over time ⚡",
    ]


def _preview(conv: ParsedConversation | None) -> str:
    if conv is None:
        return ""
    for msg in conv.messages:
        if msg.role == "user":
            return msg.content[:PREVIEW_CHARS]
    return ""


def compute_time_machine(conversations: list[ParsedConversation]) -> dict[str, Any]:
    """First and latest conversation snapshots with a short preview."""
    first = conversations[0] if conversations else None
    last = conversations[-1] if conversations else None
    now = datetime.now().isoformat()
    return {
        "first_conversation": {
            "title": first.title if first else "Your first chat",
            "date": first.created_at.isoformat() if first else now,
            "preview": _preview(first),
        },
        "latest_conversation": {
            "title": last.title if last else "Your latest chat",
            "date": last.created_at.isoformat() if last else now,
            "preview": _preview(last),
        },
        "biggest_shift": (
            "Your topics have evolved as you've grown with AI, "
            "from simple questions to complex explorations."
        ),
    }


# ---------------------------------------------------------------------------
# Pipeline entry points
# ---------------------------------------------------------------------------

def generate_analytics(
    conversations: list[ParsedConversation],
    tagger: Tagger | None = None,
    stop_words: frozenset[str] | None = None,
) -> AnalyticsResult:
    """Run every analysis over normalized conversations.

    Args:
        conversations: Output of ``export_parser.parse_conversations``
            (sorted ascending by creation time).
        tagger: Optional replacement for the NLTK noun tagger.
        stop_words: Optional replacement for the default stop-word set.

    Returns:
        The composite AnalyticsResult.
    """
    logger.debug("Generating analytics for %d conversations.", len(conversations))

    overview = compute_overview(conversations)
    time_patterns = compute_time_patterns(conversations)
    user_texts = _user_texts(conversations)
    titles = [c.title for c in conversations]
    top_topics = compute_top_topics(
        titles + user_texts[:MAX_TOPIC_TEXTS], tagger=tagger, stop_words=stop_words,
    )
    categories = compute_categories(conversations)
    model_usage = compute_model_usage(conversations)
    personality = compute_personality(conversations, categories, time_patterns)
    achievements = compute_achievements(overview, time_patterns, categories)
    word_cloud = extract_word_frequencies(user_texts[:MAX_WORD_CLOUD_TEXTS], stop_words=stop_words)
    mood_journey = compute_mood_journey(conversations)
    evolution = compute_evolution(conversations, tagger=tagger, stop_words=stop_words)
    power_metrics = compute_power_metrics(conversations, overview)
    fun_facts = compute_fun_facts(overview, time_patterns, personality, power_metrics)
    predictions = compute_predictions(top_topics, categories, personality)
    time_machine = compute_time_machine(conversations)

    return AnalyticsResult(
        overview=overview,
        time_patterns=time_patterns,
        top_topics=top_topics,
        categories=categories,
        model_usage=model_usage,
        personality=personality,
        achievements=achievements,
        word_cloud=word_cloud,
        mood_journey=mood_journey,
        evolution=evolution,
        power_metrics=power_metrics,
        fun_facts=fun_facts,
        predictions=predictions,
        time_machine=time_machine,
    )


def analyze_export(
    data: Any,
    id_factory: Callable[[], str] | None = None,
    tagger: Tagger | None = None,
    stop_words: frozenset[str] | None = None,
) -> AnalyticsResult:
    """Validate, normalize and analyze a decoded export.

    Raises:
        ValidationError: If *data* does not look like a conversation export.
        EmptyResultError: If no conversation has usable messages.
    """
    if not validate_export(data):
        raise ValidationError("Invalid file: expected a ChatGPT conversations.json export.")

    conversations = parse_conversations(data, id_factory=id_factory)
    if not conversations:
        raise EmptyResultError("No conversations found in the export.")

    return generate_analytics(conversations, tagger=tagger, stop_words=stop_words)


def analyze_export_bytes(raw: bytes | str, **kwargs: Any) -> AnalyticsResult:
    """Decode raw JSON bytes or text, then run ``analyze_export``.

    Raises:
        DecodeError: If *raw* is not valid JSON.
        ValidationError: If the JSON is not a conversation export.
        EmptyResultError: If no conversation has usable messages.
    """
    return analyze_export(decode_export(raw), **kwargs)


def build_analytics_payload(path: str = "conversations.json") -> dict[str, Any]:
    """One-call entry point: load the export file and return the result dict.

    Raises:
        FileNotFoundError: If the export file does not exist.
        DecodeError: If the file contains invalid JSON.
        ValidationError: If the JSON is not a conversation export.
        EmptyResultError: If no conversation has usable messages.
    """
    return analyze_export(load_export(path)).as_dict()


# ---------------------------------------------------------------------------
# CLI helpers (used by wrapped_summary.py)
# ---------------------------------------------------------------------------

def save_analytics_files(payload: dict[str, Any], output_dir: str = "chat_wrapped") -> None:
    """Write the analytics payload as JSON plus CSV tables to *output_dir*.

    Creates the directory if needed and writes analytics.json,
    monthly_activity.csv and categories.csv.
    """
    os.makedirs(output_dir, exist_ok=True)

    with open(f"{output_dir}/analytics.json", "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)

    with open(f"{output_dir}/monthly_activity.csv", "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=["month", "count"])
        writer.writeheader()
        writer.writerows(payload["time_patterns"]["monthly_distribution"])

    with open(f"{output_dir}/categories.csv", "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=["name", "count", "percentage"], extrasaction="ignore")
        writer.writeheader()
        writer.writerows(payload["categories"])


def print_summary_report(payload: dict[str, Any]) -> None:
    """Print a human-readable summary of the analytics payload to stdout."""
    overview = payload["overview"]
    patterns = payload["time_patterns"]
    power = payload["power_metrics"]
    personality = payload["personality"]

    print(f"\n{'=' * 60}")
    print("ChatGPT Wrapped")
    print(f"{'=' * 60}")
    print(f"Total Conversations: {overview['total_conversations']:,}")
    print(f"Total Messages: {overview['total_messages']:,}")
    print(f"Total Words: {overview['total_words']:,}")
    print(f"First Chat: {overview['first_conversation']['date'][:10]}")
    print(f"Last Chat: {overview['last_conversation']['date'][:10]}")
    print(f"Days Active: {overview['total_days_active']:,}")
    print(f"Conversations per Day: {overview['avg_conversations_per_day']}")

    print(f"\n{'=' * 60}")
    print("Habits")
    print(f"{'=' * 60}")
    print(f"Busiest Hour: {patterns['busiest_hour']}:00 ({patterns['peak_period']})")
    print(f"Busiest Day: {patterns['busiest_day']}")
    print(f"Busiest Month: {patterns['busiest_month']}")
    print(f"Longest Streak: {power['longest_streak']} days")
    print(f"Questions Asked: {power['questions_asked']:,}")
    print(f"Code Blocks Generated: {power['code_blocks_generated']:,}")

    if payload["categories"]:
        print("\nTop Categories:")
        for cat in payload["categories"][:5]:
            print(f"  {cat['name']}: {cat['count']:,} ({cat['percentage']}%)")

    if payload["top_topics"]:
        print("\nTop Topics:")
        for topic in payload["top_topics"][:5]:
            print(f"  {topic['topic']}: {topic['count']:,}")

    print(f"\nPersonality: {personality['archetype']} {personality['archetype_emoji']}")
    print(f"  {personality['archetype_description']}")
    unlocked = sum(1 for a in payload["achievements"] if a["unlocked"])
    print(f"Achievements Unlocked: {unlocked}/{len(payload['achievements'])}")
    print(f"{'=' * 60}")
