import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

# ----------------------------------------------------------------
# Constants
# ----------------------------------------------------------------
DEFAULT_TIMEOUT = 3600  # seconds, package installs on slow mirrors

OHMYZSH_INSTALL_URL = (
    "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
)
MESLO_URL_BASE = "https://github.com/romkatv/powerlevel10k-media/raw/master"
MESLO_FONTS = [
    "MesloLGS NF Regular.ttf",
    "MesloLGS NF Bold.ttf",
    "MesloLGS NF Italic.ttf",
    "MesloLGS NF Bold Italic.ttf",
]
TERMINAL_FONT = "MesloLGS NF Regular 12"

CHROME_DEB_URL = (
    "https://dl.google.com/linux/direct/google-chrome-stable_current_amd64.deb"
)
MINICONDA_URL = (
    "https://repo.anaconda.com/miniconda/Miniconda3-latest-Linux-x86_64.sh"
)
MICROSOFT_KEY_URL = "https://packages.microsoft.com/keys/microsoft.asc"
VSCODE_APT_LINE = "deb [arch=amd64] https://packages.microsoft.com/repos/code stable main"

TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class GitRepo:
    name: str
    url: str
    kind: str = "plugins"  # plugins | themes


# ----------------------------------------------------------------
# Runtime Configuration
# ----------------------------------------------------------------
@dataclass
class Config:
    """
    Paths and tunables shared by every workflow.

    Built once per run (see ``from_env``) and passed explicitly to each
    detect/install/patch step instead of exporting shell variables.
    """

    home: Path = field(default_factory=Path.home)
    zsh_custom: Optional[Path] = None
    workon_home: Optional[Path] = None
    log_file: Optional[Path] = None
    strict: bool = False
    jobs: int = 1
    login_shell: str = ""
    microsoft_keyring: Path = Path("/etc/apt/trusted.gpg.d/microsoft.gpg")
    vscode_sources_list: Path = Path("/etc/apt/sources.list.d/vscode.list")
    base_packages: List[str] = field(
        default_factory=lambda: [
            "zsh",
            "git",
            "curl",
            "wget",
            "fzf",
            "autojump",
            "fonts-powerline",
            "build-essential",
            "htop",
            "tree",
            "ripgrep",
            "fd-find",
            "neovim",
        ]
    )
    python_packages: List[str] = field(
        default_factory=lambda: [
            "python3",
            "python3-pip",
            "python3-venv",
            "python3-dev",
            "build-essential",
            "software-properties-common",
        ]
    )
    omz_plugins: List[str] = field(
        default_factory=lambda: [
            "git",
            "zsh-autosuggestions",
            "zsh-syntax-highlighting",
            "zsh-completions",
            "fzf",
            "autojump",
        ]
    )
    zsh_theme: str = "powerlevel10k/powerlevel10k"
    git_repos: List[GitRepo] = field(
        default_factory=lambda: [
            GitRepo(
                "zsh-autosuggestions",
                "https://github.com/zsh-users/zsh-autosuggestions.git",
            ),
            GitRepo(
                "zsh-syntax-highlighting",
                "https://github.com/zsh-users/zsh-syntax-highlighting.git",
            ),
            GitRepo(
                "zsh-completions",
                "https://github.com/zsh-users/zsh-completions.git",
            ),
            GitRepo(
                "powerlevel10k",
                "https://github.com/romkatv/powerlevel10k.git",
                kind="themes",
            ),
        ]
    )

    def __post_init__(self):
        self.home = Path(self.home)
        if self.zsh_custom is None:
            self.zsh_custom = self.ohmyzsh_dir / "custom"
        if self.workon_home is None:
            self.workon_home = self.home / ".virtualenvs"
        if self.log_file is None:
            self.log_file = self.home / ".cache" / "ubuntu-toolbox" / "ubuntu_toolbox.log"
        self.zsh_custom = Path(self.zsh_custom)
        self.workon_home = Path(self.workon_home)
        self.log_file = Path(self.log_file)
        self.jobs = max(1, int(self.jobs))

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, home: Optional[Path] = None
    ) -> "Config":
        env = os.environ if environ is None else environ
        home = Path(home) if home is not None else Path.home()

        def path_var(name: str) -> Optional[Path]:
            value = env.get(name, "").strip()
            return Path(value).expanduser() if value else None

        try:
            jobs = int(env.get("UBUNTU_TOOLBOX_JOBS", "1"))
        except ValueError:
            jobs = 1

        return cls(
            home=home,
            zsh_custom=path_var("ZSH_CUSTOM"),
            workon_home=path_var("WORKON_HOME"),
            log_file=path_var("UBUNTU_TOOLBOX_LOG_FILE"),
            strict=env.get("UBUNTU_TOOLBOX_STRICT", "").strip().lower() in TRUTHY,
            jobs=jobs,
            login_shell=env.get("SHELL", ""),
        )

    # Derived paths
    @property
    def ohmyzsh_dir(self) -> Path:
        return self.home / ".oh-my-zsh"

    @property
    def zshrc(self) -> Path:
        return self.home / ".zshrc"

    @property
    def bashrc(self) -> Path:
        return self.home / ".bashrc"

    @property
    def font_dir(self) -> Path:
        return self.home / ".local" / "share" / "fonts"

    @property
    def conda_dir(self) -> Path:
        return self.home / "miniconda3"

    @property
    def dolphin_service_dir(self) -> Path:
        return self.home / ".local" / "share" / "kservices5" / "ServiceMenus"

    @property
    def nautilus_scripts_dir(self) -> Path:
        return self.home / ".local" / "share" / "nautilus" / "scripts"

    def repo_dest(self, repo: GitRepo) -> Path:
        return self.zsh_custom / repo.kind / repo.name
