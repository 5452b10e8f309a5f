"""Seed Redis with three weeks of demo check-ins.

Run: python -m scripts.seed_demo (from the repo root)

Weekday work mornings lean Angry/Stressed, weekend nature walks lean
Happy, and bad sleep the night before tends to precede a Sad morning,
so every insight has something to show.
"""

import random
from datetime import datetime, timedelta, timezone

import redis

from moodpatterns.config.settings import REDIS_URL
from moodpatterns.models.checkin import CheckIn, ContextTag, EmotionSelection
from moodpatterns.store.checkin_store import clear_data, save_checkin, save_custom_tag

DAYS = 21


def _checkin(cid: str, when: datetime, node_id: str, intensity: int,
             tags: list[str], energy: int, stress: int, note: str = "") -> CheckIn:
    ts = int(when.timestamp() * 1000)
    return CheckIn(
        id=cid,
        timestamp=ts,
        emotions=[EmotionSelection(node_id=node_id, is_primary=True)],
        note=note,
        intensity=intensity,
        scale_values={"energy": energy, "stress": stress},
        tags=tags,
        created_at=ts,
    )


def seed():
    r = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    clear_data(r)
    rng = random.Random(7)

    save_custom_tag(ContextTag("custom_climbing", "activity", "Climbing", is_user_created=True), r)

    start = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    start -= timedelta(days=DAYS)

    check_ins = []
    for day in range(DAYS):
        date = start + timedelta(days=day)
        weekend = date.weekday() >= 5

        if weekend:
            check_ins.append(_checkin(
                f"demo-{day}-am", date + timedelta(hours=10),
                rng.choice(["happy_content_joyful", "happy_peaceful_thankful"]),
                rng.choice([2, 3]), ["nature", "friends"],
                energy=rng.randint(3, 5), stress=rng.randint(1, 2),
                note="Long walk outside",
            ))
        else:
            check_ins.append(_checkin(
                f"demo-{day}-am", date + timedelta(hours=9),
                rng.choice(["angry_frustrated_annoyed", "bad_stressed_overwhelmed", "bad_busy_rushed"]),
                rng.choice([2, 3]), ["work", "colleagues"],
                energy=rng.randint(1, 3), stress=rng.randint(3, 5),
            ))

        if day % 4 == 0:
            check_ins.append(_checkin(
                f"demo-{day}-pm", date + timedelta(hours=22),
                "bad_tired_sleepy", 1, ["bad_sleep", "home"],
                energy=1, stress=3, note="Couldn't switch off",
            ))
        elif day % 4 == 1:
            check_ins.append(_checkin(
                f"demo-{day}-pm", date + timedelta(hours=19),
                "happy_powerful_courageous", 2, ["custom_climbing", "friends"],
                energy=4, stress=2,
            ))

    # Morning after bad sleep
    for day in range(0, DAYS, 4):
        when = start + timedelta(days=day + 1, hours=7)
        check_ins.append(_checkin(
            f"demo-{day}-after", when, "sad_lonely_isolated", 2, ["home"],
            energy=2, stress=3,
        ))

    for c in check_ins:
        save_checkin(c, r)

    print(f"Seeded {len(check_ins)} check-ins over {DAYS} days")


if __name__ == "__main__":
    seed()
