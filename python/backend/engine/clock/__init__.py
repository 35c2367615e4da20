from backend.engine.clock.clock import Clock, ManualClock, ThreadClock

__all__ = ["Clock", "ManualClock", "ThreadClock"]
