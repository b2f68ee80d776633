import sys
from dataclasses import dataclass, field

import psutil


@dataclass
class Job:
    procs: list
    cmdline: str = ""

    @property
    def pid(self):
        return self.procs[-1].pid

    def finished(self):
        # poll() reaps every process that has exited
        return all([p.poll() is not None for p in self.procs])


@dataclass
class JobTable:
    """Background pipelines, reaped from the main loop between prompts."""

    jobs: list = field(default_factory=list)

    def __len__(self):
        return len(self.jobs)

    def add(self, procs, cmdline=""):
        """Thêm job vào danh sách background"""
        job = Job(list(procs), cmdline)
        self.jobs.append(job)
        print(f"[{job.pid}] started in background: {cmdline}", flush=True)
        return job

    def reap(self):
        """Dọn zombie và thông báo khi pipeline nền kết thúc"""
        done = [job for job in self.jobs if job.finished()]
        for job in done:
            self.jobs.remove(job)
            print(f"[{job.pid}] finished: {job.cmdline}", flush=True)
        return done

    def running(self):
        return [job for job in self.jobs if not job.finished()]

    def report_running(self, out=None):
        """Hiển thị danh sách tiến trình nền còn chạy"""
        out = out or sys.stdout
        jobs = self.running()
        if not jobs:
            return

        print(f"{'PID':<8} {'Command'}", file=out)
        print("-" * 40, file=out)
        for job in jobs:
            try:
                status = psutil.Process(job.pid).status()
            except psutil.NoSuchProcess:
                status = "terminated"
            except psutil.AccessDenied:
                status = "unknown"
            print(f"{job.pid:<8} {job.cmdline}  [{status}]", file=out)
