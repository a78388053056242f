#!/usr/bin/env python3
"""
Demo script to test CodeIndex MCP tools without an MCP client.
Exercises all tools and shows their behavior.

Usage:
  python self_test/demo_mcp.py [path_to_git_repo]

If no path provided, creates a temporary multi-language git repository.
"""
import sys
import json
import asyncio
import subprocess
import tempfile
import shutil
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

# Import MCP tools - access underlying functions from FastMCP wrappers
from codeindex_mcp.indexing.cache import IndexCache
from codeindex_mcp.mcp.server import (
    code_search as code_search_tool,
    code_outline as code_outline_tool,
    code_map as code_map_tool,
    reindex as reindex_tool,
    index_status as index_status_tool,
    list_supported_languages as list_supported_languages_tool
)
from codeindex_mcp.mcp.state import get_state, reset_state

# Get underlying functions
code_search = code_search_tool.fn
code_outline = code_outline_tool.fn
code_map = code_map_tool.fn
reindex = reindex_tool.fn
index_status = index_status_tool.fn
list_supported_languages = list_supported_languages_tool.fn

console = Console()


def create_sample_project(base_path: Path) -> Path:
    """Create a small multi-language git repository for the demo."""
    project = base_path / "sample_project"
    (project / "src" / "api").mkdir(parents=True, exist_ok=True)
    (project / "cmd").mkdir(parents=True, exist_ok=True)

    (project / "src" / "calculator.py").write_text('''"""Calculator module."""

MAX_OPERANDS = 10


def hello(name: str) -> str:
    return f"Hello, {name}!"


class Calculator:
    def add(self, a: int, b: int) -> int:
        return a + b

    def divide(self, a: int, b: int) -> float:
        return a / b

    def _check(self, value):
        return value
''')

    (project / "src" / "api" / "users.ts").write_text('''export interface User {
  id: number;
  name: string;
}

export type UserId = number;

export function createUser(name: string): User {
  return { id: 1, name };
}

export const deleteUser = (id: UserId): boolean => true;

export class UserService {
  findUser(id: UserId): User | undefined {
    return undefined;
  }
}
''')

    (project / "cmd" / "main.go").write_text('''package main

type Server struct {
	Addr string
}

func NewServer(addr string) *Server {
	return &Server{Addr: addr}
}

func (s *Server) Start() error {
	return nil
}
''')

    (project / "README.md").write_text("# Sample project\n")

    subprocess.run(["git", "init", "-q"], cwd=project, check=True)
    subprocess.run(["git", "add", "."], cwd=project, check=True)
    subprocess.run(
        ["git", "-c", "user.name=demo", "-c", "user.email=demo@example.com",
         "commit", "-q", "-m", "Initial commit"],
        cwd=project, check=True,
    )
    return project


def format_json(data: dict) -> str:
    """Format dict as colored JSON."""
    return json.dumps(data, indent=2, default=str)


def print_tool_call(name: str, params: dict = None):
    """Print a tool call header."""
    params_str = format_json(params) if params else "{}"
    console.print(f"\n[bold cyan]>>> Calling:[/bold cyan] [yellow]{name}[/yellow]")
    if params:
        console.print(Panel(
            Syntax(params_str, "json", theme="monokai"),
            title="Parameters",
            border_style="dim"
        ))


def print_result(result: dict):
    """Print a JSON tool result."""
    console.print(Panel(
        Syntax(format_json(result), "json", theme="monokai"),
        title="Result",
        border_style="green"
    ))


def print_text(text: str):
    """Print a plain-text tool result."""
    console.print(Panel(text, title="Result", border_style="green"))


def run_demo(project_path: Path, cache_dir: Path, sample: bool = True):
    """Run the full demo sequence."""

    console.print(Panel.fit(
        "[bold]CodeIndex MCP Demo[/bold]\n"
        "Testing all MCP tools with real output",
        border_style="blue"
    ))

    console.print(f"\n[bold]Project path:[/bold] {project_path}\n")
    get_state().cache = IndexCache(cache_dir)

    # 1. list_supported_languages
    console.rule("[bold magenta]1. list_supported_languages[/bold magenta]")
    print_tool_call("list_supported_languages")
    result = list_supported_languages()

    table = Table(title="Supported Languages")
    table.add_column("Language", style="cyan")
    table.add_column("Extensions", style="green")
    for lang, exts in sorted(result["languages"].items()):
        table.add_row(lang, ", ".join(exts))
    console.print(table)

    # 2. reindex (fresh build)
    console.rule("[bold magenta]2. reindex (fresh build)[/bold magenta]")
    print_tool_call("reindex", {"path": str(project_path)})
    result = asyncio.run(reindex(path=str(project_path)))
    print_result(result)

    # 3. index_status
    console.rule("[bold magenta]3. index_status[/bold magenta]")
    print_tool_call("index_status")
    print_result(index_status())

    # 4. code_map
    console.rule("[bold magenta]4. code_map[/bold magenta]")
    print_tool_call("code_map")
    print_text(code_map())

    # 5. code_outline - directory and file
    console.rule("[bold magenta]5. code_outline[/bold magenta]")
    for params in ({"path": "src", "depth": 2}, {"path": "src/calculator.py"}):
        print_tool_call("code_outline", params)
        print_text(code_outline(**params))

    # 6. code_search - one query per tier, plus a filter
    console.rule("[bold magenta]6. code_search[/bold magenta]")
    queries = [
        {"query": "Calculator"},
        {"query": "calculator"},
        {"query": "create"},
        {"query": "User", "kind": "interface"},
        {"query": "server", "exported": True},
    ]
    for params in queries:
        print_tool_call("code_search", params)
        print_text(code_search(**params))

    # 7. Edit a file and rebuild (only our own sample project is modified)
    console.rule("[bold magenta]7. reindex after an edit[/bold magenta]")
    if sample:
        calculator = project_path / "src" / "calculator.py"
        calculator.write_text(calculator.read_text() + '''

def new_feature() -> str:
    return "This is new!"
''')
        console.print("[yellow]Added new_feature() to src/calculator.py[/yellow]")

    print_tool_call("reindex")
    print_result(asyncio.run(reindex()))
    print_tool_call("code_search", {"query": "new_feature"})
    print_text(code_search(query="new_feature"))

    # 8. Unchanged repository restores from cache
    console.rule("[bold magenta]8. reindex from cache[/bold magenta]")
    reset_state()
    get_state().cache = IndexCache(cache_dir)
    console.print("[yellow]State cleared[/yellow]")

    print_tool_call("reindex", {"path": str(project_path)})
    print_result(asyncio.run(reindex(path=str(project_path))))

    # Summary
    console.print(Panel.fit(
        "[bold green]Demo Complete![/bold green]\n\n"
        "All 6 MCP tools exercised:\n"
        "  - list_supported_languages\n"
        "  - reindex (fresh, after edit, cached)\n"
        "  - index_status\n"
        "  - code_map\n"
        "  - code_outline\n"
        "  - code_search",
        border_style="green"
    ))


def main():
    """Main entry point."""
    temp_dir = tempfile.mkdtemp(prefix="codeindex_demo_")
    cache_dir = Path(temp_dir) / "cache"

    try:
        if len(sys.argv) > 1:
            # Use provided path
            project_path = Path(sys.argv[1]).resolve()
            if not project_path.exists():
                console.print(f"[red]Error: Path does not exist: {project_path}[/red]")
                sys.exit(1)
            if not project_path.is_dir():
                console.print(f"[red]Error: Path is not a directory: {project_path}[/red]")
                sys.exit(1)
        else:
            project_path = create_sample_project(Path(temp_dir))
            console.print(f"[dim]Created temporary sample project at: {project_path}[/dim]")

        run_demo(project_path, cache_dir, sample=len(sys.argv) <= 1)

    except KeyboardInterrupt:
        console.print("\n[yellow]Demo interrupted[/yellow]")
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)
        console.print("[dim]Cleaned up temporary files[/dim]")


if __name__ == "__main__":
    main()
