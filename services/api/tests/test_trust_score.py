from datetime import datetime, timedelta

from app.services.trust import (
    BASE_SCORE,
    calculate_rating_trust_score,
    calculate_trust_score,
    round_half_up,
)


def test_empty_list_scores_base(now: datetime) -> None:
    t = calculate_trust_score([], now=now)
    assert t.score == BASE_SCORE == 45
    assert t.volume == 0
    assert t.source_count == 1
    assert t.freshest_days is None
    assert t.calculated_at == now


def test_three_sources_six_mentions_fresh(now: datetime, make_mention) -> None:
    mentions = [
        make_mention(source=source, link=f"https://example.com/{source}/{i}", created_at=now)
        for source in ("HackerNews", "Reddit", "News")
        for i in range(2)
    ]
    t = calculate_trust_score(mentions, now=now)
    # 45 + min(30, 18) + min(15, 8) + min(20, 20)
    assert t.score == 91
    assert t.volume == 6
    assert t.source_count == 3
    assert t.freshest_days == 0


def test_score_is_capped_at_99(now: datetime, make_mention) -> None:
    mentions = [
        make_mention(source=f"S{i % 5}", link=f"https://example.com/{i}", created_at=now)
        for i in range(20)
    ]
    assert calculate_trust_score(mentions, now=now).score == 99


def test_freshness_uses_most_recent_mention(now: datetime, make_mention) -> None:
    mentions = [
        make_mention(link="https://example.com/old", created_at=now - timedelta(days=40)),
        make_mention(link="https://example.com/new", created_at=now - timedelta(days=5)),
    ]
    t = calculate_trust_score(mentions, now=now)
    # 45 + 6 + 0 + 15
    assert t.score == 66
    assert t.freshest_days == 5


def test_mentions_without_timestamp_use_default_freshness(now: datetime, make_mention) -> None:
    mentions = [make_mention(link=f"https://example.com/{i}", created_at=None) for i in range(2)]
    t = calculate_trust_score(mentions, now=now)
    # freshest defaults to 30 days -> no freshness points
    assert t.score == 45 + 6
    assert t.freshest_days is None


def test_fractional_freshness_rounds_half_up(now: datetime, make_mention) -> None:
    mentions = [make_mention(created_at=now - timedelta(days=2, hours=12))]
    t = calculate_trust_score(mentions, now=now)
    # 45 + 3 + 0 + 17.5 = 65.5 -> 66
    assert t.score == 66
    assert t.freshest_days == 3


def test_future_timestamps_cap_freshness(now: datetime, make_mention) -> None:
    t = calculate_trust_score([make_mention(created_at=now + timedelta(days=3))], now=now)
    assert t.score == 45 + 3 + 20


def test_score_always_in_range(now: datetime, make_mention) -> None:
    for n in range(0, 15):
        mentions = [
            make_mention(source=f"S{i % 4}", link=f"https://example.com/{i}", created_at=now - timedelta(days=i))
            for i in range(n)
        ]
        assert 0 <= calculate_trust_score(mentions, now=now).score <= 99


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2
    assert round_half_up(0.5) == 1


def test_rating_trust_score_is_a_separate_formula() -> None:
    assert calculate_rating_trust_score(4.9) == 98
    assert calculate_rating_trust_score(5.0) == 100
    assert calculate_rating_trust_score(0) == 0
    assert calculate_rating_trust_score(4.33) == 87
