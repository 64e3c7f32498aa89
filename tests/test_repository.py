"""
애드온 저장소 관리자 테스트 모듈

AddonRepo의 캐시 로드, 복제, 복사, 삭제 동작을 명령 실행기와 파일 시스템을
모킹하여 검증합니다.
"""

from unittest.mock import AsyncMock, MagicMock, call

import pytest

from addon_manager.addons.repository import AddonRepo
from addon_manager.exceptions import CommandFailedException, DirtyAddonException
from addon_manager.models.base import Config, ProcessResult, RequiredAddon
from addon_manager.models.enums import RunMode
from addon_manager.process.filesystem import FileSystem
from addon_manager.process.runner import ProcessRunner

PROJECT_DIR = "some/work/dir"
CACHE_PATH = PROJECT_DIR + "/.addons"
ADDONS_PATH = PROJECT_DIR + "/addons"

ADDON_CACHE_PATH = CACHE_PATH + "/chicken"
ADDON_DIR = ADDONS_PATH + "/chicken"


def failing(command_prefix):
    """지정한 명령에서만 실패하는 side_effect 생성"""
    async def side_effect(cwd, command, mode):
        if command[:len(command_prefix)] == command_prefix:
            raise CommandFailedException(command, cwd, 1, stderr="fatal: 실패")
        return ProcessResult()
    return side_effect


@pytest.fixture
def config():
    """테스트용 경로 설정"""
    return Config(
        project_path=PROJECT_DIR,
        cache_path=CACHE_PATH,
        addons_path=ADDONS_PATH
    )


@pytest.fixture
def addon():
    """테스트용 애드온 명세"""
    return RequiredAddon(
        name="chicken",
        config_file_path="some/working/dir/addons.json",
        url="git@github.com:chickensoft-games/Chicken.git",
        checkout="Main",
        subfolder="subfolder"
    )


@pytest.fixture
def runner():
    """모킹된 명령 실행기"""
    runner = MagicMock(spec=ProcessRunner)
    runner.run = AsyncMock(return_value=ProcessResult())
    return runner


@pytest.fixture
def fs():
    """모킹된 파일 시스템"""
    fs = MagicMock(spec=FileSystem)
    fs.exists.return_value = False
    return fs


@pytest.fixture
def repo(runner, fs):
    """애드온 저장소 관리자 픽스처"""
    return AddonRepo(runner, fs)


class TestLoadCache:
    """캐시 로드 테스트"""

    @pytest.mark.asyncio
    async def test_creates_missing_cache_directory(self, repo, runner, fs):
        """캐시 디렉토리가 없으면 생성하고 빈 결과 반환"""
        config = Config(
            project_path="project/",
            cache_path="project/.addons",
            addons_path="project/addons"
        )

        cache = await repo.load_cache(config)

        assert cache == {}
        fs.exists.assert_called_once_with("project/.addons")
        fs.create_directory.assert_called_once_with("project/.addons")
        fs.list_directories.assert_not_called()
        runner.run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_maps_remote_urls_to_cache_directories(self, repo, runner, fs):
        """각 캐시 디렉토리의 origin URL로 매핑"""
        config = Config(
            project_path="project/",
            cache_path="project/.addons",
            addons_path="project/addons"
        )
        url1 = "git@github.com:chickensoft-games/addon_1.git"
        url2 = "git@github.com:chickensoft-games/addon_2.git"

        fs.exists.return_value = True
        fs.list_directories.return_value = [
            "project/.addons/addon_1",
            "project/.addons/addon_2"
        ]
        runner.run.side_effect = [
            ProcessResult(stdout=url1 + "\n"),
            ProcessResult(stdout=url2 + "\n")
        ]

        cache = await repo.load_cache(config)

        assert cache == {
            url1: "project/.addons/addon_1",
            url2: "project/.addons/addon_2"
        }
        assert runner.run.await_args_list == [
            call("project/.addons/addon_1", ["git", "remote", "get-url", "origin"], RunMode.STRICT),
            call("project/.addons/addon_2", ["git", "remote", "get-url", "origin"], RunMode.STRICT)
        ]
        fs.create_directory.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_cache_directory(self, repo, runner, fs, config):
        """하위 디렉토리가 없는 캐시"""
        fs.exists.return_value = True
        fs.list_directories.return_value = []

        assert await repo.load_cache(config) == {}
        runner.run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_url_last_directory_wins(self, repo, runner, fs, config):
        """같은 URL이 두 번 나오면 나중 디렉토리 사용"""
        url = "git@github.com:chickensoft-games/Chicken.git"
        fs.exists.return_value = True
        fs.list_directories.return_value = [CACHE_PATH + "/a", CACHE_PATH + "/b"]
        runner.run.side_effect = [ProcessResult(stdout=url), ProcessResult(stdout=url)]

        cache = await repo.load_cache(config)

        assert cache == {url: CACHE_PATH + "/b"}

    @pytest.mark.asyncio
    async def test_missing_remote_is_fatal(self, repo, runner, fs, config):
        """origin 원격이 없는 캐시 디렉토리는 오류"""
        fs.exists.return_value = True
        fs.list_directories.return_value = [CACHE_PATH + "/broken"]
        runner.run.side_effect = CommandFailedException(
            ["git", "remote", "get-url", "origin"], CACHE_PATH + "/broken", 2
        )

        with pytest.raises(CommandFailedException):
            await repo.load_cache(config)


class TestCacheAddon:
    """애드온 캐시 테스트"""

    @pytest.mark.asyncio
    async def test_clones_missing_addon(self, repo, runner, fs, config, addon):
        """캐시에 없는 애드온 복제"""
        await repo.cache_addon(addon, config)

        fs.exists.assert_called_once_with(ADDON_CACHE_PATH)
        runner.run.assert_awaited_once_with(
            CACHE_PATH,
            ["git", "clone", addon.url, "--recurse-submodules", "chicken"],
            RunMode.STRICT
        )

    @pytest.mark.asyncio
    async def test_does_nothing_if_already_cached(self, repo, runner, fs, config, addon):
        """이미 캐시된 애드온은 아무것도 하지 않음"""
        fs.exists.return_value = True

        await repo.cache_addon(addon, config)

        runner.run.assert_not_awaited()
        fs.create_directory.assert_not_called()

    @pytest.mark.asyncio
    async def test_is_idempotent(self, repo, runner, fs, config, addon):
        """두 번 호출해도 복제는 한 번"""
        fs.exists.side_effect = [False, True]

        await repo.cache_addon(addon, config)
        await repo.cache_addon(addon, config)

        assert runner.run.await_count == 1

    @pytest.mark.asyncio
    async def test_clone_failure_propagates(self, repo, runner, config, addon):
        """복제 실패는 호출자에게 전달"""
        runner.run.side_effect = failing(["git", "clone"])

        with pytest.raises(CommandFailedException) as exc_info:
            await repo.cache_addon(addon, config)

        assert exc_info.value.command[:2] == ["git", "clone"]

    @pytest.mark.asyncio
    async def test_example_scenario(self, repo, runner, fs):
        """p/.addons/chicken 이 없을 때 한 번 복제, 생긴 뒤에는 호출 없음"""
        config = Config(project_path="p", cache_path="p/.addons", addons_path="p/addons")
        addon = RequiredAddon(
            name="chicken",
            url="git@host:org/Chicken.git",
            checkout="Main",
            subfolder="subfolder"
        )

        fs.exists.return_value = False
        await repo.cache_addon(addon, config)

        fs.exists.return_value = True
        await repo.cache_addon(addon, config)

        assert runner.run.await_args_list == [
            call(
                "p/.addons",
                ["git", "clone", "git@host:org/Chicken.git", "--recurse-submodules", "chicken"],
                RunMode.STRICT
            )
        ]


class TestCopyAddonFromCache:
    """캐시에서 애드온 복사 테스트"""

    @staticmethod
    def expected_calls(copy_from=ADDON_CACHE_PATH + "/subfolder/"):
        return [
            call(ADDON_CACHE_PATH, ["git", "checkout", "-f", "Main"], RunMode.STRICT),
            call(ADDON_CACHE_PATH, ["git", "pull"], RunMode.UNCHECKED),
            call(
                ADDON_CACHE_PATH,
                ["git", "submodule", "update", "--init", "--recursive"],
                RunMode.UNCHECKED
            ),
            call(
                PROJECT_DIR,
                ["rsync", "-av", copy_from, ADDON_DIR, "--exclude", ".git"],
                RunMode.STRICT
            ),
            call(ADDON_DIR, ["git", "init"], RunMode.STRICT),
            call(ADDON_DIR, ["git", "add", "-A"], RunMode.STRICT),
            call(ADDON_DIR, ["git", "commit", "-m", "Initial commit"], RunMode.STRICT)
        ]

    @pytest.mark.asyncio
    async def test_copies_addon(self, repo, runner, config, addon):
        """checkout, pull, submodule, rsync, init, add, commit 순서로 실행"""
        await repo.copy_addon_from_cache(addon, config)

        assert runner.run.await_args_list == self.expected_calls()

    @pytest.mark.asyncio
    async def test_creates_addons_path_before_sync(self, repo, runner, fs, config, addon):
        """설치 디렉토리가 없으면 복사 전에 생성"""
        await repo.copy_addon_from_cache(addon, config)

        fs.exists.assert_called_once_with(ADDONS_PATH)
        fs.create_directory.assert_called_once_with(ADDONS_PATH)

    @pytest.mark.asyncio
    async def test_existing_addons_path_is_reused(self, repo, runner, fs, config, addon):
        """설치 디렉토리가 있으면 생성하지 않음"""
        fs.exists.return_value = True

        await repo.copy_addon_from_cache(addon, config)

        fs.create_directory.assert_not_called()
        assert runner.run.await_args_list == self.expected_calls()

    @pytest.mark.asyncio
    async def test_repository_root_subfolder(self, repo, runner, config, addon):
        """하위 폴더가 "/"이면 저장소 루트 내용을 복사"""
        root_addon = addon.model_copy(update={"subfolder": "/"})

        await repo.copy_addon_from_cache(root_addon, config)

        assert runner.run.await_args_list == self.expected_calls(ADDON_CACHE_PATH + "/")

    @pytest.mark.asyncio
    async def test_nested_subfolder(self, repo, runner, config, addon):
        """중첩된 하위 폴더 경로"""
        nested = addon.model_copy(update={"subfolder": "/addons/chicken/"})

        await repo.copy_addon_from_cache(nested, config)

        rsync_call = runner.run.await_args_list[3]
        assert rsync_call.args[1][2] == ADDON_CACHE_PATH + "/addons/chicken/"

    @pytest.mark.asyncio
    async def test_checkout_failure_stops_copy(self, repo, runner, config, addon):
        """checkout 실패 시 이후 단계 실행 안 함"""
        runner.run.side_effect = failing(["git", "checkout"])

        with pytest.raises(CommandFailedException):
            await repo.copy_addon_from_cache(addon, config)

        assert runner.run.await_count == 1

    @pytest.mark.asyncio
    async def test_pull_and_submodule_failures_are_ignored(self, repo, runner, config, addon):
        """pull, submodule 실패는 복사를 멈추지 않음"""
        async def side_effect(cwd, command, mode):
            if command[1] in ("pull", "submodule"):
                assert mode == RunMode.UNCHECKED
                return ProcessResult(return_code=1, stderr="offline")
            return ProcessResult()

        runner.run.side_effect = side_effect

        await repo.copy_addon_from_cache(addon, config)

        assert runner.run.await_args_list == self.expected_calls()

    @pytest.mark.asyncio
    async def test_sync_failure_stops_before_init(self, repo, runner, config, addon):
        """rsync 실패 시 git init 실행 안 함"""
        runner.run.side_effect = failing(["rsync"])

        with pytest.raises(CommandFailedException):
            await repo.copy_addon_from_cache(addon, config)

        assert runner.run.await_count == 4

    @pytest.mark.asyncio
    async def test_commit_failure_propagates(self, repo, runner, config, addon):
        """커밋 실패는 호출자에게 전달"""
        runner.run.side_effect = failing(["git", "commit"])

        with pytest.raises(CommandFailedException):
            await repo.copy_addon_from_cache(addon, config)

        assert runner.run.await_count == 7


class TestDeleteAddon:
    """애드온 삭제 테스트"""

    @pytest.mark.asyncio
    async def test_deletes_clean_addon(self, repo, runner, fs, config, addon):
        """변경 사항이 없으면 rm -rf 실행"""
        fs.exists.return_value = True

        await repo.delete_addon(addon, config)

        fs.exists.assert_called_once_with(ADDON_DIR)
        assert runner.run.await_args_list == [
            call(ADDON_DIR, ["git", "status", "--porcelain"], RunMode.UNCHECKED),
            call(ADDONS_PATH, ["rm", "-rf", ADDON_DIR], RunMode.STRICT)
        ]

    @pytest.mark.asyncio
    async def test_does_nothing_if_addon_missing(self, repo, runner, fs, config, addon):
        """설치되지 않은 애드온은 아무것도 하지 않음"""
        await repo.delete_addon(addon, config)

        runner.run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_refuses_modified_addon(self, repo, runner, fs, config, addon):
        """변경 사항이 있으면 삭제 거부"""
        fs.exists.return_value = True
        runner.run.return_value = ProcessResult(stdout=" M plugin.cfg\n?? notes.txt\n")

        with pytest.raises(DirtyAddonException) as exc_info:
            await repo.delete_addon(addon, config)

        runner.run.assert_awaited_once_with(
            ADDON_DIR, ["git", "status", "--porcelain"], RunMode.UNCHECKED
        )
        assert exc_info.value.addon_name == "chicken"
        assert exc_info.value.addon_dir == ADDON_DIR
        assert exc_info.value.changed_files == ["plugin.cfg", "notes.txt"]
        assert exc_info.value.error_code == "DIRTY_ADDON"

    @pytest.mark.asyncio
    async def test_dirty_refusal_is_not_command_failure(self, repo, runner, fs, config, addon):
        """변경 거부는 명령 실패와 구분됨"""
        fs.exists.return_value = True
        runner.run.return_value = ProcessResult(stdout="a file was changed")

        with pytest.raises(DirtyAddonException) as exc_info:
            await repo.delete_addon(addon, config)

        assert not isinstance(exc_info.value, CommandFailedException)

    @pytest.mark.asyncio
    async def test_status_exit_code_is_ignored(self, repo, runner, fs, config, addon):
        """status 종료 코드가 0이 아니어도 출력이 비어 있으면 삭제"""
        fs.exists.return_value = True
        runner.run.side_effect = [
            ProcessResult(return_code=128, stderr="not a git repository"),
            ProcessResult()
        ]

        await repo.delete_addon(addon, config)

        assert runner.run.await_args_list[-1] == call(
            ADDONS_PATH, ["rm", "-rf", ADDON_DIR], RunMode.STRICT
        )

    @pytest.mark.asyncio
    async def test_remove_failure_propagates(self, repo, runner, fs, config, addon):
        """삭제 명령 실패는 호출자에게 전달"""
        fs.exists.return_value = True
        runner.run.side_effect = failing(["rm"])

        with pytest.raises(CommandFailedException):
            await repo.delete_addon(addon, config)


class TestDefaults:
    """기본 협력자 테스트"""

    def test_default_collaborators(self):
        """실행기와 파일 시스템 기본값"""
        from addon_manager.process.filesystem import LocalFileSystem
        from addon_manager.process.runner import ShellProcessRunner

        repo = AddonRepo()

        assert isinstance(repo.runner, ShellProcessRunner)
        assert isinstance(repo.fs, LocalFileSystem)
