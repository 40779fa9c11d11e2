"""Seed a development database with users, tagged questions and answers."""
import asyncio
import argparse
import random
import time
from datetime import datetime, timezone, timedelta

from rocketfuel.database import engine, async_session, Base
from rocketfuel.models import User, Question, Answer, Tag

TAGS = ["python", "fastapi", "postgresql", "redis", "docker", "kubernetes",
        "react", "typescript", "aws", "devops", "testing", "performance",
        "security", "slack", "alembic", "sqlalchemy"]

TOPICS = ["deploy", "debug", "profile", "migrate", "monitor", "cache", "test"]


async def seed(small: bool = False):
    num_users = 5 if small else 25
    num_questions = 30 if small else 1000
    max_answers = 2 if small else 5

    print(f"Seeding: {num_users} users, {num_questions} questions, up to {max_answers} answers each")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        tags = [Tag(name=name) for name in TAGS]
        session.add_all(tags)

        users = [
            User(name=f"User {i}", email=f"user_{i:03d}@example.com")
            for i in range(num_users)
        ]
        session.add_all(users)
        await session.flush()
        print(f"  Created {len(tags)} tags and {len(users)} users")

        total_answers = 0
        accepted = 0
        for i in range(num_questions):
            asked = datetime.now(timezone.utc) - timedelta(hours=random.randint(0, 24 * 90))
            topic, tool = random.choice(TOPICS), random.choice(TAGS)
            owner = random.choice(users)
            question = Question(
                user_id=owner.id,
                title=f"How do I {topic} {tool} in production? (#{i})",
                question=f"We run {tool} behind our API and need to {topic} it. " * 3,
                votes=random.randint(0, 40),
                created_at=asked,
            )
            question.tags.extend(random.sample(tags, k=random.randint(1, 3)))
            session.add(question)
            await session.flush()

            answers = []
            for j in range(random.randint(0, max_answers)):
                answer = Answer(
                    user_id=random.choice(users).id,
                    question_id=question.id,
                    answer=f"Try pinning your {tool} version and {topic} step by step ({j}).",
                    votes=random.randint(-3, 15),
                    created_at=asked + timedelta(minutes=5 * (j + 1)),
                )
                session.add(answer)
                answers.append(answer)
            total_answers += len(answers)

            # Roughly a third of answered questions get an accepted answer.
            if answers and random.random() < 0.33:
                random.choice(answers).accepted = True
                question.answered = True
                accepted += 1

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Users: {num_users}")
    print(f"  Questions: {num_questions} ({accepted} answered)")
    print(f"  Answers: {total_answers}")
    print(f"  Tags: {len(TAGS)}")


def main():
    parser = argparse.ArgumentParser(description="Seed the rocket-fuel database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (30 questions)")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
