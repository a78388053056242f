import shutil
import subprocess

import pytest
from pathlib import Path

from codeindex_mcp.core.models import Symbol, SymbolKind
from codeindex_mcp.indexing.cache import IndexCache
from codeindex_mcp.mcp.state import reset_state, get_state


@pytest.fixture(autouse=True)
def clean_state():
    """Reset MCP state before and after each test."""
    reset_state()
    yield
    reset_state()


@pytest.fixture
def cache_dir(tmp_path):
    """Cache directory outside any test repository."""
    return tmp_path / "cache"


@pytest.fixture
def session_cache(cache_dir):
    """Point the MCP session at a throwaway cache instead of ~/.cache."""
    cache = IndexCache(cache_dir)
    get_state().cache = cache
    return cache


def git(root: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-c", "user.name=test", "-c", "user.email=test@example.com",
         "-c", "commit.gpgsign=false", *args],
        cwd=root, capture_output=True, text=True, check=True,
    )
    return result.stdout


SAMPLE_FILES = {
    "src/app.py": '''"""Application entry point."""

MAX_RETRIES = 3


def hello(name: str) -> str:
    return f"Hello, {name}!"


def _private():
    pass


class Calculator:
    def add(self, a: int, b: int) -> int:
        return a + b

    def _reset(self):
        pass
''',
    "src/api/users.ts": '''export interface User {
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
''',
    "cmd/main.go": '''package main

type Server struct {
	Addr string
}

func NewServer(addr string) *Server {
	return &Server{Addr: addr}
}

func (s *Server) Start() error {
	return nil
}
''',
    "lib/shapes.rs": '''pub struct Point {
    x: i32,
}

impl Point {
    pub fn new(x: i32) -> Self {
        Point { x }
    }
}
''',
    "lib/models.rb": '''class User
  def initialize(name)
    @name = name
  end

  def self.create(attrs)
    new(attrs)
  end
end
''',
    "README.md": "# Sample project\n",
    ".gitignore": "build/\n",
}


@pytest.fixture
def git_project(tmp_path):
    """Create a committed multi-language git repository."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    root = tmp_path / "project"
    for relative, content in SAMPLE_FILES.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    # Ignored by .gitignore, never discovered
    (root / "build").mkdir()
    (root / "build" / "generated.py").write_text("def generated(): pass\n")

    git(root, "init", "-q")
    git(root, "add", ".")
    git(root, "commit", "-q", "-m", "Initial commit")
    return root


@pytest.fixture
def make_symbol():
    """Factory for Symbols with sensible defaults, for index and render tests."""
    def factory(name, kind=SymbolKind.FUNCTION, file="src/a.ts", line=1, **kwargs) -> Symbol:
        return Symbol(name=name, kind=kind, file=file, line=line, **kwargs)
    return factory


@pytest.fixture
def run_git():
    """The git helper, for tests that commit or init repositories themselves."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    return git
