from app import create_app, db
from app.models import Game, PickEntry, PickSelection, Standing

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "db": db,
        "Game": Game,
        "PickEntry": PickEntry,
        "PickSelection": PickSelection,
        "Standing": Standing,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
