import subprocess
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock, patch

from commit_ai.vcs.git_client import GitClient, GitError


class DummyProc(SimpleNamespace):
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""


class TestGitClient(unittest.TestCase):
    def _client_with_calls(self, returncode=0, stdout=""):
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=returncode, stdout=stdout, stderr="")

        patcher = patch.object(GitClient, "_run", autospec=True)
        mock_run = patcher.start()
        self.addCleanup(patcher.stop)
        mock_run.side_effect = fake_run
        return GitClient(Path("/repo")), calls

    def test_is_repo_true(self) -> None:
        client, calls = self._client_with_calls(stdout="true\n")
        self.assertTrue(client.is_repo())
        self.assertEqual(calls, [["rev-parse", "--is-inside-work-tree"]])

    def test_is_repo_false_on_failure(self) -> None:
        client, _ = self._client_with_calls(returncode=128, stdout="")
        self.assertFalse(client.is_repo())

    def test_intent_to_add(self) -> None:
        client, calls = self._client_with_calls()
        client.intent_to_add(".")
        self.assertEqual(calls, [["add", "--intent-to-add", "."]])

    def test_diff_passes_revision_and_pathspecs(self) -> None:
        client, calls = self._client_with_calls(stdout="diff --git a/x b/x\n")
        out = client.diff("HEAD", [":(exclude)dist"])
        self.assertEqual(out, "diff --git a/x b/x\n")
        self.assertEqual(calls, [["diff", "HEAD", "--", ".", ":(exclude)dist"]])

    def test_stage_all(self) -> None:
        client, calls = self._client_with_calls()
        client.stage_all()
        self.assertEqual(calls, [["add", "."]])

    def test_commit_with_body_uses_two_messages(self) -> None:
        client, calls = self._client_with_calls()
        client.commit("feat: add parser", "- add parser module")
        self.assertEqual(
            calls, [["commit", "-m", "feat: add parser", "-m", "- add parser module"]]
        )

    def test_commit_without_body(self) -> None:
        client, calls = self._client_with_calls()
        client.commit("fix: typo", "   ")
        self.assertEqual(calls, [["commit", "-m", "fix: typo"]])


class TestGitClientRun(unittest.TestCase):
    @patch("commit_ai.vcs.git_client.subprocess.run")
    def test_run_raises_on_nonzero_exit(self, mock_run):
        mock_run.return_value = Mock(returncode=128, stdout="", stderr="fatal: bad revision 'HEAD'\n")
        client = GitClient(Path("/fake/repo"))
        with self.assertRaises(GitError) as ctx:
            client.diff("HEAD")
        self.assertIn("bad revision", str(ctx.exception))

    @patch("commit_ai.vcs.git_client.subprocess.run")
    def test_run_uses_cwd(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")
        client = GitClient(Path("/fake/repo"))
        client.stage_all()
        args, kwargs = mock_run.call_args
        self.assertEqual(args[0], ["git", "add", "."])
        self.assertEqual(kwargs["cwd"], Path("/fake/repo"))
        self.assertEqual(kwargs["stdout"], subprocess.PIPE)

    @patch("commit_ai.vcs.git_client.subprocess.run", side_effect=FileNotFoundError("git"))
    def test_missing_git_binary(self, _mock_run):
        client = GitClient(Path("/fake/repo"))
        with self.assertRaises(GitError):
            client.stage_all()
        self.assertFalse(client.is_repo())

    def test_defaults_to_current_directory(self):
        self.assertEqual(GitClient().cwd, Path.cwd())


if __name__ == "__main__":
    unittest.main()
