"""Deploy: a small release tool built on warble.

Demonstrates literals, optional and catch-all parameters, boolean
flags, repeated options, route groups, the ``--`` separator, and an
async handler.

Run:
    python app.py deploy prod --force --tag v1 --tag hotfix
    python app.py git log --oneline -- README.md
"""

import anyio

from warble import App, AppConfig

app = App(AppConfig(name="deploy"))


@app.route("")
def usage() -> None:
    print("usage: deploy <command> [options]")


@app.route("deploy {env|Target environment} --force?|Skip confirmations --tag,-t {tags}*")
def deploy(env: str, force: bool, tags: list[str]) -> None:
    mode = "forced" if force else "normal"
    print(f"Deploying to {env} ({mode})")
    for tag in tags:
        print(f"  tag: {tag}")


@app.route("status {service?}", description="Show service status")
def status(service: str = "all") -> None:
    print(f"Status of {service}: ok")


@app.route("backup {*files} --compress")
def backup(files: list[str], compress: bool) -> int:
    if not files:
        print("nothing to back up")
        return 1
    suffix = " (compressed)" if compress else ""
    print(f"Backing up {len(files)} file(s){suffix}")
    return 0


@app.route("wait {seconds:double}")
async def wait(seconds: float) -> None:
    await anyio.sleep(seconds)
    print(f"Waited {seconds}s")


git = app.group("git")


@git.route("commit --message,-m {msg} --amend?")
def commit(msg: str, amend: bool) -> None:
    verb = "Amended" if amend else "Committed"
    print(f"{verb}: {msg}")


@git.route("log --oneline? -- {*paths}")
def log(oneline: bool, paths: str) -> None:
    style = "oneline" if oneline else "full"
    print(f"log ({style}) {paths}".rstrip())


if __name__ == "__main__":
    raise SystemExit(app.run())
