from umbra_web.app_factory import create_app

if __name__ == "__main__":
    app = create_app()
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])

#############################
#
# Key design patterns used
# •	Application Factory: create_app() builds the app and dependencies.
# •	Dependency Injection (manual): scheduler and fixture providers are passed into
#   the workspace factory, which hands them to every ModuleShell.
# •	Service Layer: ModuleShell owns one module's Idle/Pending/Complete job.
# •	Repository: WorkspaceRepository keeps one Workspace per browser session (in memory).
# •	Strategy: Scheduler and FixtureProvider are swappable (tests use manual/static ones).
######################################################################
# Runtime request flow
# •	GET /modules/<id>            render the module page from the shell's snapshot
# •	POST /modules/<id>/submit    set_artifact + dispatch -> Pending, timer scheduled
# •	(timer thread)               fixture built -> Complete, unless reset/disposed meanwhile
# •	GET /api/modules/<id>        JSON status for polling
# •	POST /modules/<id>/findings/<n>/toggle   mark a correction applied / not applied
# •	POST /modules/<id>/reset     back to Idle, timer cancelled
# •	POST /workspace/close        dispose all eight shells of this session
