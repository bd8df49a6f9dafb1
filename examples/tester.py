import asyncio
import logging
import sys

import rtfilter


logging.basicConfig(level=logging.INFO)


input_name = sys.argv[1] if len(sys.argv) > 1 else "tempopad"	# MIDI controller device
output_name = sys.argv[2] if len(sys.argv) > 2 else "fluid"		# fluidsynth

controller = rtfilter.Controller(input_device_name=input_name, output_device_name=output_name)

stair = rtfilter.StairStep(delay=0.2, feedback=4)

# Only note 48 gets the pedal tone; every other note falls through to the stairs.
controller.add_filter("pedal", ["note_on", "note_off"], rtfilter.PedalTone(pedal=36, continue_chain=False), rtfilter.Gate(trigger=48))
controller.add_filter("stair", ["note_on", "note_off"], stair)

asyncio.run(controller.run())
