"""Tests for the multi-post splitter."""

import pytest

from services.errors import CompletionError
from services.pipeline.post_splitter import parse_posts, split_posts

POSTS = [
    {"postName": "Assistant Audit Officer", "vacancies": 120, "eligibility": "Graduate",
     "payLevel": "Level 8", "ageLimit": "18-30"},
    {"postName": "Tax Assistant", "vacancies": 500, "eligibility": None,
     "payLevel": "Level 4", "ageLimit": None},
]


class TestSplitPosts:
    @pytest.mark.asyncio
    async def test_returns_posts(self, fake_completion):
        completion = fake_completion(POSTS)
        posts = await split_posts("CGL notification " * 10, completion)
        assert [p.post_name for p in posts] == ["Assistant Audit Officer", "Tax Assistant"]
        assert posts[1].vacancies == 500
        assert completion.calls[0]["max_output_tokens"] == 1000

    @pytest.mark.asyncio
    async def test_prompt_uses_text_prefix(self, fake_completion):
        completion = fake_completion(POSTS)
        text = "A" * 100 + "B" * 100
        await split_posts(text, completion, prefix_chars=100)
        prompt = completion.calls[0]["user_prompt"]
        assert "A" * 100 in prompt
        assert "B" not in prompt.split("NOTIFICATION TEXT:")[1]

    @pytest.mark.asyncio
    async def test_completion_failure_yields_none(self, fake_completion):
        completion = fake_completion(CompletionError("boom"))
        assert await split_posts("text", completion) is None

    @pytest.mark.asyncio
    async def test_unexpected_error_yields_none(self, fake_completion):
        completion = fake_completion(RuntimeError("boom"))
        assert await split_posts("text", completion) is None


class TestParsePosts:
    def test_wrapped_in_object(self):
        posts = parse_posts('{"posts": [{"postName": "JE"}]}')
        assert posts[0].post_name == "JE"

    def test_code_fenced(self):
        assert len(parse_posts('```json\n[{"postName": "JE"}]\n```')) == 1

    @pytest.mark.parametrize(
        "content",
        ["not json", '{"postName": "JE"}', '[{"vacancies": 3}]', '[{"postName": 5}]'],
    )
    def test_invalid_yields_none(self, content):
        assert parse_posts(content) is None
