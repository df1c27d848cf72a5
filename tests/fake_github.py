"""
Fake GitHub REST API for tests.

Serves a fixed set of users and repositories. Some logins trigger failures:
- "ratelimited"     -> 403 on every user endpoint
- "garbled"         -> 200 with a body that is not JSON
- "hubot"           -> followers endpoint answers 403, the rest works
- unknown logins    -> 404

Search queries:
- "ratelimited"     -> 403
- "explode"         -> 500
- anything else     -> repositories whose name or description contains it

Every request path (with query string) is recorded in app.state.requests.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse


def make_user(id: int, login: str, **extra) -> dict:
    return {
        "id": id,
        "login": login,
        "avatar_url": f"https://avatars.githubusercontent.com/u/{id}",
        "html_url": f"https://github.com/{login}",
        "type": "User",
        "site_admin": False,
        **extra,
    }


def make_repository(id: int, owner: dict, name: str, stars: int, **extra) -> dict:
    return {
        "id": id,
        "node_id": f"R_{id}",
        "name": name,
        "full_name": f"{owner['login']}/{name}",
        "description": extra.pop("description", None),
        "language": extra.pop("language", None),
        "stargazers_count": stars,
        "forks": extra.pop("forks", 0),
        "watchers": stars,
        "open_issues_count": extra.pop("open_issues_count", 0),
        "private": False,
        "fork": extra.pop("fork", False),
        "created_at": "2011-01-26T19:01:12Z",
        "updated_at": extra.pop("updated_at", "2024-01-01T00:00:00Z"),
        "pushed_at": "2024-01-01T00:00:00Z",
        "html_url": f"https://github.com/{owner['login']}/{name}",
        "owner": {"login": owner["login"], "id": owner["id"], "avatar_url": owner["avatar_url"]},
        **extra,
    }


OCTOCAT = make_user(
    583231,
    "octocat",
    name="The Octocat",
    bio=None,
    company="@github",
    blog="https://github.blog",
    location="San Francisco",
    public_repos=2,
    followers=2,
    following=1,
)
HUBOT = make_user(480938, "hubot", name="Hubot", bio="I am a robot", public_repos=1, followers=0, following=1)
DEFUNKT = make_user(2, "defunkt", name="Chris Wanstrath", public_repos=0, followers=1, following=0)
MOJOMBO = make_user(1, "mojombo", name="Tom Preston-Werner", public_repos=0, followers=0, following=0)

USERS = {user["login"]: user for user in (OCTOCAT, HUBOT, DEFUNKT, MOJOMBO)}

FOLLOWERS = {
    "octocat": [DEFUNKT, MOJOMBO],
    "hubot": [],
    "defunkt": [OCTOCAT],
    "mojombo": [],
}
FOLLOWING = {
    "octocat": [DEFUNKT],
    "hubot": [OCTOCAT],
    "defunkt": [],
    "mojombo": [],
}

HELLO_WORLD = make_repository(
    1296269,
    OCTOCAT,
    "Hello-World",
    2700,
    description="My first repository on GitHub!",
    updated_at="2024-03-01T00:00:00Z",
)
SPOON_KNIFE = make_repository(
    1300192,
    OCTOCAT,
    "Spoon-Knife",
    12800,
    description="This repo is for demonstration purposes only.",
    language="HTML",
    updated_at="2024-02-01T00:00:00Z",
)
HUBOT_REPO = make_repository(2247740, HUBOT, "hubot-scripts", 3500, language="CoffeeScript")

REPOSITORIES = {
    "octocat": [HELLO_WORLD, SPOON_KNIFE],
    "hubot": [HUBOT_REPO],
    "defunkt": [],
    "mojombo": [],
}

# 25 matches for "swift", more than one search page
SWIFT_REPOSITORIES = [
    make_repository(9000 + n, MOJOMBO, f"swift-kit-{n}", n * 10, language="Swift", description="Swift helpers")
    for n in range(1, 26)
]

ALL_REPOSITORIES = [HELLO_WORLD, SPOON_KNIFE, HUBOT_REPO, *SWIFT_REPOSITORIES]

NOT_FOUND = {"message": "Not Found", "documentation_url": "https://docs.github.com/rest"}
RATE_LIMITED = {
    "message": "API rate limit exceeded for 127.0.0.1.",
    "documentation_url": "https://docs.github.com/rest/overview/resources-in-the-rest-api#rate-limiting",
}


def create_fake_github() -> FastAPI:
    app = FastAPI(title="Fake GitHub API")
    app.state.requests = []

    @app.middleware("http")
    async def record(request: Request, call_next):
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        app.state.requests.append(path)
        return await call_next(request)

    def user_failure(login: str) -> JSONResponse | PlainTextResponse | None:
        if login == "ratelimited":
            return JSONResponse(RATE_LIMITED, status_code=403)
        if login == "garbled":
            return PlainTextResponse("<html>definitely not json</html>")
        if login not in USERS:
            return JSONResponse(NOT_FOUND, status_code=404)
        return None

    @app.get("/users/{login}")
    async def get_user(login: str):
        return user_failure(login) or USERS[login]

    @app.get("/users/{login}/repos")
    async def get_repos(login: str, sort: str = "full_name", per_page: int = 30):
        failure = user_failure(login)
        if failure:
            return failure
        repos = REPOSITORIES[login]
        if sort == "updated":
            repos = sorted(repos, key=lambda repo: repo["updated_at"], reverse=True)
        return repos[:per_page]

    @app.get("/users/{login}/followers")
    async def get_followers(login: str, per_page: int = 30):
        if login == "hubot":
            return JSONResponse(RATE_LIMITED, status_code=403)
        return user_failure(login) or FOLLOWERS[login][:per_page]

    @app.get("/users/{login}/following")
    async def get_following(login: str, per_page: int = 30):
        return user_failure(login) or FOLLOWING[login][:per_page]

    @app.get("/search/repositories")
    async def search_repositories(q: str, sort: str = "best-match", order: str = "desc", per_page: int = 30):
        if q == "ratelimited":
            return JSONResponse(RATE_LIMITED, status_code=403)
        if q == "explode":
            return JSONResponse({"message": "Server Error"}, status_code=500)

        needle = q.lower()
        matches = [
            repo
            for repo in ALL_REPOSITORIES
            if needle in repo["name"].lower() or needle in (repo["description"] or "").lower()
        ]
        if sort == "stars":
            matches.sort(key=lambda repo: repo["stargazers_count"], reverse=order == "desc")
        return {"total_count": len(matches), "incomplete_results": False, "items": matches[:per_page]}

    return app
