"""
Tests for configuration defaults and environment overrides.
"""

from pathlib import Path

from ubuntu_toolbox.config import Config, GitRepo


def test_defaults_follow_home(tmp_path):
    config = Config.from_env({}, home=tmp_path)
    assert config.zsh_custom == tmp_path / ".oh-my-zsh" / "custom"
    assert config.workon_home == tmp_path / ".virtualenvs"
    assert config.log_file == tmp_path / ".cache" / "ubuntu-toolbox" / "ubuntu_toolbox.log"
    assert config.strict is False
    assert config.jobs == 1
    assert config.zsh_theme == "powerlevel10k/powerlevel10k"


def test_environment_overrides(tmp_path):
    config = Config.from_env(
        {
            "ZSH_CUSTOM": str(tmp_path / "zsh"),
            "WORKON_HOME": str(tmp_path / "envs"),
            "UBUNTU_TOOLBOX_LOG_FILE": str(tmp_path / "run.log"),
            "UBUNTU_TOOLBOX_STRICT": "Yes",
            "UBUNTU_TOOLBOX_JOBS": "4",
            "SHELL": "/usr/bin/zsh",
        },
        home=tmp_path,
    )
    assert config.zsh_custom == tmp_path / "zsh"
    assert config.workon_home == tmp_path / "envs"
    assert config.log_file == tmp_path / "run.log"
    assert config.strict is True
    assert config.jobs == 4
    assert config.login_shell == "/usr/bin/zsh"


def test_blank_overrides_use_defaults(tmp_path):
    config = Config.from_env({"ZSH_CUSTOM": "  ", "UBUNTU_TOOLBOX_STRICT": "0"}, home=tmp_path)
    assert config.zsh_custom == tmp_path / ".oh-my-zsh" / "custom"
    assert config.strict is False


def test_bad_jobs_value(tmp_path):
    assert Config.from_env({"UBUNTU_TOOLBOX_JOBS": "many"}, home=tmp_path).jobs == 1
    assert Config.from_env({"UBUNTU_TOOLBOX_JOBS": "-2"}, home=tmp_path).jobs == 1


def test_repo_destinations(tmp_path):
    config = Config(home=tmp_path)
    assert config.repo_dest(GitRepo("powerlevel10k", "url", kind="themes")) == (
        tmp_path / ".oh-my-zsh" / "custom" / "themes" / "powerlevel10k"
    )
    assert [r.kind for r in config.git_repos].count("themes") == 1


def test_paths_are_normalised():
    config = Config(home="/home/dev", workon_home="/srv/envs")
    assert config.home == Path("/home/dev")
    assert config.workon_home == Path("/srv/envs")
