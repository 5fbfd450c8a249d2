"""Tests for board, topic and reply API endpoints."""

from httpx import AsyncClient

from nobby.context import ForumContext


async def start_topic(client: AsyncClient, title: str = "Hello", body: str = "First post") -> dict:
    response = await client.post("/api/boards/main/topics", json={"title": title, "body": body})
    assert response.status_code == 201
    return response.json()


class TestBoardIndex:
    """Tests for the board index."""

    async def test_index_lists_seeded_board(self, client: AsyncClient) -> None:
        response = await client.get("/api/boards")

        assert response.status_code == 200
        boards = response.json()["boards"]
        assert len(boards) == 1
        assert boards[0]["board"]["slug"] == "main"
        assert boards[0]["topic_count"] == 0
        assert boards[0]["last_post"] is None

    async def test_index_shows_last_post(self, client: AsyncClient, register) -> None:
        await register("Nova")
        topic = await start_topic(client, title="Greetings")

        boards = (await client.get("/api/boards")).json()["boards"]

        assert boards[0]["topic_count"] == 1
        assert boards[0]["post_count"] == 1
        assert boards[0]["last_post"]["topic_id"] == topic["id"]
        assert boards[0]["last_post"]["topic_title"] == "Greetings"
        assert boards[0]["last_post"]["author_name"] == "Nova"


class TestBoardPage:
    """Tests for one board's topic list."""

    async def test_unknown_board(self, client: AsyncClient) -> None:
        response = await client.get("/api/boards/nowhere")
        assert response.status_code == 404

    async def test_empty_board_has_one_page(self, client: AsyncClient) -> None:
        data = (await client.get("/api/boards/main")).json()
        assert data["topics"] == []
        assert data["total"] == 0
        assert data["total_pages"] == 1

    async def test_page_below_one_is_first_page(self, client: AsyncClient, register) -> None:
        await register("Nova")
        await start_topic(client)

        data = (await client.get("/api/boards/main", params={"page": -3})).json()
        assert data["page"] == 1
        assert len(data["topics"]) == 1

    async def test_pagination(self, client: AsyncClient, forum: ForumContext) -> None:
        board = await forum.content.get_board_by_slug("main")
        for number in range(forum.settings.page_size * 2 + 1):
            await forum.content.create_topic_with_first_post(
                board.id, f"Topic {number}", "Nova", "Body", 1000 + number
            )

        data = (await client.get("/api/boards/main", params={"page": 3})).json()

        assert data["total"] == forum.settings.page_size * 2 + 1
        assert data["total_pages"] == 3
        assert [topic["title"] for topic in data["topics"]] == ["Topic 0"]


class TestCreateTopic:
    """Tests for starting topics."""

    async def test_author_comes_from_session(self, client: AsyncClient, register) -> None:
        """An author field in the request body is ignored."""
        await register("Nova")

        response = await client.post(
            "/api/boards/main/topics",
            json={"title": "  Hello  ", "body": "First post", "author_name": "Mallory"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["author_name"] == "Nova"
        assert data["title"] == "Hello"

    async def test_requires_login(self, client: AsyncClient, forum: ForumContext) -> None:
        response = await client.post(
            "/api/boards/main/topics", json={"title": "Hello", "body": "First post"}
        )

        assert response.status_code == 401
        board = await forum.content.get_board_by_slug("main")
        assert await forum.content.count_topics_by_board(board.id) == 0

    async def test_blank_fields_rejected(self, client: AsyncClient, register) -> None:
        await register("Nova")
        response = await client.post(
            "/api/boards/main/topics", json={"title": "   ", "body": "First post"}
        )
        assert response.status_code == 400

    async def test_unknown_board(self, client: AsyncClient, register) -> None:
        await register("Nova")
        response = await client.post(
            "/api/boards/nowhere/topics", json={"title": "Hello", "body": "First post"}
        )
        assert response.status_code == 404

    async def test_counters_updated(self, client: AsyncClient, register) -> None:
        await register("Nova")
        await start_topic(client)

        me = (await client.get("/api/auth/me")).json()
        assert me["thread_count"] == 1
        assert me["post_count"] == 1
        assert me["comment_count"] == 0


class TestTopicPage:
    """Tests for reading topics and replying."""

    async def test_topic_page(self, client: AsyncClient, register) -> None:
        await register("Nova")
        topic = await start_topic(client, body="Opening words")

        response = await client.get(f"/api/topics/{topic['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["topic"]["title"] == "Hello"
        assert [post["body"] for post in data["posts"]] == ["Opening words"]
        assert data["total_pages"] == 1

    async def test_unknown_topic(self, client: AsyncClient) -> None:
        response = await client.get("/api/topics/9999")
        assert response.status_code == 404

    async def test_non_numeric_topic_id(self, client: AsyncClient) -> None:
        response = await client.get("/api/topics/abc")
        assert response.status_code == 400

    async def test_reply(
        self, client: AsyncClient, other_client: AsyncClient, register
    ) -> None:
        await register("Nova")
        topic = await start_topic(client)
        await other_client.post(
            "/api/auth/register",
            json={
                "username": "Orion",
                "email": "orion@example.com",
                "password": "hunter22",
                "repeat_password": "hunter22",
            },
        )

        response = await other_client.post(
            f"/api/topics/{topic['id']}/replies",
            json={"body": "Welcome!", "author_name": "Nova"},
        )

        assert response.status_code == 201
        assert response.json()["author_name"] == "Orion"

        data = (await client.get(f"/api/topics/{topic['id']}")).json()
        assert [post["author_name"] for post in data["posts"]] == ["Nova", "Orion"]
        board = (await client.get("/api/boards/main")).json()
        assert board["topics"][0]["reply_count"] == 1

    async def test_reply_requires_login(
        self, client: AsyncClient, other_client: AsyncClient, register
    ) -> None:
        await register("Nova")
        topic = await start_topic(client)

        response = await other_client.post(
            f"/api/topics/{topic['id']}/replies", json={"body": "Drive-by"}
        )

        assert response.status_code == 401
        data = (await client.get(f"/api/topics/{topic['id']}")).json()
        assert data["total"] == 1

    async def test_reply_to_unknown_topic(self, client: AsyncClient, register) -> None:
        await register("Nova")
        response = await client.post("/api/topics/9999/replies", json={"body": "Hello?"})
        assert response.status_code == 404

    async def test_empty_reply(self, client: AsyncClient, register) -> None:
        await register("Nova")
        topic = await start_topic(client)
        response = await client.post(f"/api/topics/{topic['id']}/replies", json={"body": "  "})
        assert response.status_code == 400


class TestCreateBoard:
    """Tests for the administrator board endpoint."""

    async def test_non_admin_forbidden(self, client: AsyncClient, register) -> None:
        await register("Nova")
        response = await client.post("/api/boards", json={"slug": "art", "title": "Art"})
        assert response.status_code == 403

    async def test_admin_creates_board(
        self, client: AsyncClient, forum: ForumContext, register
    ) -> None:
        user = (await register("Nova")).json()
        await forum.accounts.set_admin(user["id"])

        response = await client.post(
            "/api/boards", json={"slug": "art", "title": "Art", "section": "Creative"}
        )
        duplicate = await client.post("/api/boards", json={"slug": "art", "title": "Art again"})

        assert response.status_code == 201
        assert response.json()["section"] == "Creative"
        assert duplicate.status_code == 409
